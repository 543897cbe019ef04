"""
Content Intelligence - command-line interface.

It can be invoked as 'contentintel' from anywhere after installation.

Example usage:
    # Analyze content (category is detected automatically)
    contentintel analyze "Vaccines cause magnetism"
    contentintel analyze https://example.com/app --caller user@example.com
    contentintel analyze https://cdn.example.com/clip.mp4 --output report.json

    # Caller and history
    contentintel status --caller user@example.com
    contentintel upgrade user@example.com pure
    contentintel history --limit 10

    # Administration (requires admin credentials)
    contentintel admin master off --password secret
    contentintel admin toggle news --password secret
    contentintel admin paywall on --password secret
"""

import argparse
import getpass
import json
import os
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv

from contentintel.core.models import AccessDenial, AnalysisRequest
from contentintel.core.result_writer import create_result_writer, render_text
from contentintel.features.manager import ContentIntelligenceDispatcher, create_dispatcher
from contentintel.utils.config import load_config
from contentintel.utils.errors import AdminAuthError, ContentIntelError
from contentintel.utils.logging import setup_logging_from_config

ADMIN_PASSWORD_ENV = "CONTENTINTEL_ADMIN_PASSWORD"


def _on_off(value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in ("on", "true", "1", "yes", "enable", "enabled"):
        return True
    if lowered in ("off", "false", "0", "no", "disable", "disabled"):
        return False
    raise argparse.ArgumentTypeError(f"expected on/off, got '{value}'")


def _print_json(data: Any) -> None:
    print(json.dumps(data, indent=2, default=str))


def print_outcome(request: AnalysisRequest, outcome: Any, as_json: bool = False) -> None:
    """Print a result or denial to the console."""
    if as_json:
        payload = outcome.to_dict()
        payload["category"] = outcome.category.value
        _print_json(payload)
        return
    print(render_text(request, outcome))


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


def cmd_analyze(args: argparse.Namespace, dispatcher: ContentIntelligenceDispatcher) -> int:
    content = " ".join(args.content)
    if content == "-":
        content = sys.stdin.read()

    try:
        request = AnalysisRequest(
            raw_content=content,
            category_hint=args.category,
            media_kind=args.media_kind,
            caller_identity=args.caller,
        )
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    outcome = dispatcher.analyze(request)
    print_outcome(request, outcome, as_json=args.json)

    if args.output:
        fmt = "text" if args.output.suffix.lower() == ".txt" else "json"
        create_result_writer(fmt).write(request, outcome, args.output)
        print(f"\nReport saved to: {args.output}")

    if isinstance(outcome, AccessDenial):
        return 3
    return 0


def cmd_status(args: argparse.Namespace, dispatcher: ContentIntelligenceDispatcher) -> int:
    _print_json(dispatcher.status(args.caller))
    return 0


def cmd_history(args: argparse.Namespace, dispatcher: ContentIntelligenceDispatcher) -> int:
    entries = dispatcher.admin.audit_history(args.limit)
    if args.json:
        _print_json([entry.to_dict() for entry in entries])
        return 0
    if not entries:
        print("No audit entries recorded.")
        return 0
    print(f"{'Timestamp':<27} {'Category':<8} {'Origin':<9} Summary")
    print("-" * 90)
    for entry in entries:
        summary = ", ".join(f"{k}={v}" for k, v in entry.result_summary.items())
        print(
            f"{entry.timestamp.isoformat()[:26]:<27} {entry.category.value:<8} "
            f"{entry.result_origin.value:<9} {summary}"
        )
    print("-" * 90)
    print(f"{len(entries)} entr{'y' if len(entries) == 1 else 'ies'}")
    return 0


def cmd_user_status(args: argparse.Namespace, dispatcher: ContentIntelligenceDispatcher) -> int:
    _print_json(dispatcher.registry.user_status(args.identity).to_dict())
    return 0


def cmd_upgrade(args: argparse.Namespace, dispatcher: ContentIntelligenceDispatcher) -> int:
    record = dispatcher.registry.upgrade_user(args.identity, args.plan)
    print(f"Upgraded {args.identity} to {record.plan.upper()} (level {record.access_level})")
    return 0


def cmd_admin(args: argparse.Namespace, dispatcher: ContentIntelligenceDispatcher) -> int:
    admin = dispatcher.admin
    password = args.password or os.environ.get(ADMIN_PASSWORD_ENV)
    if password is None:
        password = getpass.getpass("Admin password: ")
    admin.require_admin(args.username, password)

    action = args.admin_command
    if action == "toggle":
        if args.state is None:
            enabled = admin.toggle_category(args.category)
        else:
            enabled = admin.set_category(args.category, args.state)
        print(f"{args.category}: {'ONLINE' if enabled else 'OFFLINE'}")
    elif action == "master":
        _print_json(admin.master_override(args.state))
    elif action == "paywall":
        enabled = admin.set_paywall(args.state)
        print(f"Paywall {'ENABLED' if enabled else 'DISABLED'}")
    elif action == "prices":
        prices = {tier: getattr(args, tier) for tier in ("basic", "starter", "pure", "elite")}
        _print_json(admin.set_prices(prices))
    elif action == "sync":
        enabled = admin.toggle_sync() if args.state is None else admin.set_sync(args.state)
        print(f"Audit sync {'ENABLED' if enabled else 'DISABLED'}")
    elif action == "users":
        _print_json({identity: record.to_dict() for identity, record in admin.list_users().items()})
    elif action == "remove-user":
        if not admin.remove_user(args.identity):
            print(f"No record for {args.identity}")
            return 1
        print(f"Removed {args.identity}")
    elif action == "stats":
        _print_json(admin.audit_stats())
    elif action == "status":
        _print_json(admin.system_status())
    return 0


COMMANDS = {
    "analyze": cmd_analyze,
    "status": cmd_status,
    "history": cmd_history,
    "user-status": cmd_user_status,
    "upgrade": cmd_upgrade,
    "admin": cmd_admin,
}


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="contentintel",
        description="Classify content, check access and produce an intelligence report",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  contentintel analyze "Breaking: celebrity endorses miracle cure"
  contentintel analyze https://example.com/tool --caller user@example.com
  contentintel analyze photo.jpg --category media --media-kind image
  contentintel admin master on --password secret
        """,
    )
    parser.add_argument("--config", type=Path, default=None, help="Path to configuration file")
    parser.add_argument("--state-file", type=Path, default=None, help="Override the state document path")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose output")
    parser.add_argument("--version", action="version", version="contentintel 1.0.0")

    sub = parser.add_subparsers(dest="command", required=True)

    analyze = sub.add_parser("analyze", help="Analyze content ('-' reads stdin)")
    analyze.add_argument("content", nargs="+", help="Text, URL or file reference to analyze")
    analyze.add_argument(
        "--category", choices=["news", "tool", "media", "audio"], default=None,
        help="Skip classification and use this category",
    )
    analyze.add_argument("--media-kind", choices=["image", "video"], default=None)
    analyze.add_argument("--caller", default=None, help="Caller identity (e.g. email)")
    analyze.add_argument("--output", type=Path, default=None, help="Save the report (.json or .txt)")
    analyze.add_argument("--json", action="store_true", help="Print JSON instead of text")

    status = sub.add_parser("status", help="Show category availability for a caller")
    status.add_argument("--caller", default=None)

    history = sub.add_parser("history", help="Show the audit trail")
    history.add_argument("--limit", type=int, default=None)
    history.add_argument("--json", action="store_true")

    user_status = sub.add_parser("user-status", help="Show a caller's plan")
    user_status.add_argument("identity")

    upgrade = sub.add_parser("upgrade", help="Record a plan upgrade")
    upgrade.add_argument("identity")
    upgrade.add_argument("plan", help="basic, starter, pure or elite")

    admin = sub.add_parser("admin", help="Administrative actions")
    admin.add_argument("--username", default=None, help="Admin username (defaults to config)")
    admin.add_argument(
        "--password", default=None,
        help=f"Admin password (or set {ADMIN_PASSWORD_ENV}; prompted otherwise)",
    )
    admin_sub = admin.add_subparsers(dest="admin_command", required=True)

    toggle = admin_sub.add_parser("toggle", help="Switch one category on/off")
    toggle.add_argument("category", choices=["news", "tool", "media", "audio"])
    toggle.add_argument("state", nargs="?", type=_on_off, default=None)

    master = admin_sub.add_parser("master", help="Switch every category on/off")
    master.add_argument("state", type=_on_off)

    paywall = admin_sub.add_parser("paywall", help="Enable or disable the paywall")
    paywall.add_argument("state", type=_on_off)

    prices = admin_sub.add_parser("prices", help="Update tier prices")
    for tier in ("basic", "starter", "pure", "elite"):
        prices.add_argument(f"--{tier}", default=None)

    sync = admin_sub.add_parser("sync", help="Toggle or set audit sync")
    sync.add_argument("state", nargs="?", type=_on_off, default=None)

    admin_sub.add_parser("users", help="List registered users")
    remove = admin_sub.add_parser("remove-user", help="Delete a user's record")
    remove.add_argument("identity")
    admin_sub.add_parser("stats", help="Audit statistics")
    admin_sub.add_parser("status", help="Full system status")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the contentintel CLI."""
    load_dotenv()
    args = build_parser().parse_args(argv)

    config_path = str(args.config) if args.config else None
    config: Dict[str, Any] = load_config(config_path)
    if args.state_file is not None:
        config["store"]["path"] = str(args.state_file)
    if args.command == "admin" and args.username is None:
        args.username = config.get("admin", {}).get("username", "admin")

    setup_logging_from_config(config.get("logging", {}), verbose=args.verbose)

    try:
        with create_dispatcher(config) as dispatcher:
            return COMMANDS[args.command](args, dispatcher)
    except AdminAuthError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 4
    except (ContentIntelError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        if args.verbose:
            import traceback
            traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
