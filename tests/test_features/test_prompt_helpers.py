"""Tests for contentintel/features/prompt_helpers.py.

Validates the prompt blocks shared by the four analysis engines.
"""

import json

from contentintel.features.prompt_helpers import (
    PESSIMISM_RULE,
    build_system_prompt,
    content_block,
    guidelines_block,
    schema_block,
)


class TestContentBlock:
    def test_short_content_unchanged(self):
        assert content_block("  a claim  ") == "a claim"

    def test_long_content_truncated(self):
        block = content_block("x" * 50, max_chars=10)
        assert block.startswith("x" * 10)
        assert block.endswith("[... truncated]")
        assert "x" * 11 not in block


class TestBlocks:
    def test_schema_block_is_valid_json(self):
        structure = {"verdict": "True | False", "credibilityScore": "<0-100>"}
        block = schema_block(structure)
        payload = block.split("\n", 1)[1]
        assert json.loads(payload) == structure

    def test_guidelines_block(self):
        assert guidelines_block(["one", "two"]) == "Guidelines:\n- one\n- two"


class TestBuildSystemPrompt:
    def test_order_of_sections(self):
        prompt = build_system_prompt("You are an auditor.", {"a": 1}, ["be strict"])
        role_at = prompt.index("You are an auditor.")
        rule_at = prompt.index(PESSIMISM_RULE)
        schema_at = prompt.index("valid JSON object")
        guide_at = prompt.index("Guidelines:")
        assert role_at < rule_at < schema_at < guide_at

    def test_without_guidelines(self):
        prompt = build_system_prompt("Role.", {"a": 1})
        assert "Guidelines:" not in prompt
        assert PESSIMISM_RULE in prompt
