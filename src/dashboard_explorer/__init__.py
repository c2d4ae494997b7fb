"""
dashboard-explorer — client-side editor state for the dashboard explorer.

File: src/dashboard_explorer/__init__.py

Purpose
- Package root. Two state machines live below it:
  ``dashboard`` (schema migration chain for loaded documents) and
  ``explorer.sidebar`` (tab catalog and navigation cursor).

Import boundary
- No side effects at import time: no config loading, no logging init.
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
