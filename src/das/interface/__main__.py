"""
Run DAS.

Usage:
    python -m das.interface [--headless] [--campaigns-dir DIR] [--verbose]
"""

from .cli import main

raise SystemExit(main())
