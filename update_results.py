"""
Grade pending predictions from API-Sports results.

Usage:
    python update_results.py                # all sports
    python update_results.py --sport nba    # one league
    python update_results.py --dry-run      # match and grade without writing
"""

import sys

from sportbot.results_updater import main

if __name__ == "__main__":
    sys.exit(main())
