"""
Content Intelligence Dispatcher - Main Entry Point

Example usage:
    python main.py analyze "Vaccines cause magnetism"
    python main.py --config config/config.yaml status --caller user@example.com
"""

import sys

from contentintel.cli import main

if __name__ == "__main__":
    sys.exit(main())
