"""Preview and edit a schema-driven marketing site before publishing it.

This package loads a site's schema and published content, keeps pending edits
in a local draft, renders a preview, and publishes the draft back into the
site config. It exposes the CLI entry points used by the ``pagecraft``
console script.

Exports
-------
- ``app``: Cyclopts application with the editing subcommands.
- ``main``: Convenience function that configures logging and runs the app.
- ``EditStateStore``: The edit session used by the CLI and the renderer.

Examples
--------
>>> from pagecraft import main
>>> main()  # doctest: +SKIP
>>> from pagecraft import EditStateStore
>>> EditStateStore.__name__
'EditStateStore'
"""

from __future__ import annotations

from .cli import app, main
from .store import EditStateStore

__all__ = ["EditStateStore", "app", "main"]
