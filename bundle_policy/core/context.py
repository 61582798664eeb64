"""
Project context — the single source of truth for "which tree are we resolving."

The root is set ONCE at startup by whichever entry point launches the
process:

    - CLI:    main.py  → context.set_project_root(root)
    - Tests:  conftest → context.set_project_root(tmp_path)

Layouts built without an explicit root fall back to this value, and
then to the current working directory.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional


_project_root: Optional[Path] = None


def set_project_root(root: Path | None) -> None:
    """Register the project root for the current process (None clears it)."""
    global _project_root
    _project_root = root


def get_project_root() -> Optional[Path]:
    """Return the current project root, or None if not yet set."""
    return _project_root
