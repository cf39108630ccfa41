"""
Entry point for running the track analysis system as a module.

Usage:
    python -m track_analysis VIDEO
"""

from .cli import main

if __name__ == "__main__":
    main()
