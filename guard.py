#!/usr/bin/env python3
"""
Meeting Guard — keeps mute, camera and screen-share state in view.

Entry point. Adds the project directory to sys.path so the meetingguard
package resolves correctly whether run directly or via an alias.

Usage:
  python guard.py watch
  python guard.py detect --json
  python guard.py doctor
"""
import sys
from pathlib import Path

# Ensure the project root is on the path
sys.path.insert(0, str(Path(__file__).parent))

from meetingguard.cli.app import app

if __name__ == "__main__":
    app()
