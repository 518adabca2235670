#!/usr/bin/env python3
"""
icons.py - Console markers shared by the MissionXML command-line tools.
"""

SUCCESS = "✅"
WARNING = "⚠️"
ERROR = "❌"
INFO = "ℹ️"

MISSION = "🚀"
QUESTION = "❓"
DEPLOYMENT = "📦"
DOWNLOAD = "⬇️"


def fence(title: str, width: int = 70) -> None:
    """Print a section banner."""
    print()
    print("=" * width)
    print(title)
    print("=" * width)
