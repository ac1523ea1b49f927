"""Cyclopts CLI entrypoint for previewing and editing a configurable site.

The ``pagecraft`` console script defined here opens an editing session for
the site described by ``config/site.yaml``, restores any draft left by an
earlier invocation, applies one operation, and saves the draft again. Drafts
live under ``.pagecraft/drafts`` until they are published back into the
config file or discarded.

Examples
--------
Edit a headline and render the preview:

>>> from pagecraft.cli import app
>>> app(["set", "sections.hero-main.shortHeadline", "Tax help, fast"])  # doctest: +SKIP
>>> app(["render", "--output", "public/preview.html"])  # doctest: +SKIP

Publish the draft into the config file:

>>> from pagecraft.cli import main
>>> main()  # doctest: +SKIP
"""

from __future__ import annotations

import json
import os
import typing as typ
from pathlib import Path

import cyclopts
from cyclopts import App, Parameter

from . import log
from .blog import BlogCache, BlogClient, BlogClientError
from .cache import FileDraftCache
from .config import FieldSchema, load_site_config
from .publish import YamlPublishBackend
from .render import DEFAULT_OUTPUT, SitePreviewBuilder
from .store import EditStateStore

DEFAULT_CONFIG = Path("config/site.yaml")
DEFAULT_DRAFT_DIR = Path(".pagecraft/drafts")

ConfigOption = typ.Annotated[
    Path, Parameter(help="Path to site config", env_var="PAGECRAFT_CONFIG")
]
DraftDirOption = typ.Annotated[
    Path,
    Parameter(help="Directory holding draft patches", env_var="PAGECRAFT_DRAFT_DIR"),
]
PageOption = typ.Annotated[
    str | None, Parameter(help="Page template scope, e.g. 'service-detail'")
]

_TRUTHY = frozenset({"1", "true", "yes", "on"})

app = App(name="pagecraft", config=cyclopts.config.Env("PAGECRAFT_", command=False))  # type: ignore[unknown-argument]


def _format_path(path: Path) -> str:
    """Return a cwd-relative path when possible, otherwise the absolute path."""
    if path.is_absolute():
        try:
            return str(path.relative_to(Path.cwd()))
        except ValueError:  # pragma: no cover - fallback for different roots
            return str(path)
    return str(path)


def _open_session(
    config: Path, draft_dir: Path, page: str | None = None
) -> EditStateStore:
    """Load the config and restore the session's cached draft."""
    site_config = load_site_config(config)
    store = EditStateStore.from_config(
        site_config,
        page_type=page,
        cache=FileDraftCache(draft_dir),
        backend=YamlPublishBackend(config),
    )
    store.restore()
    return store


def _is_truthy(text: str | None) -> bool:
    return (text or "").strip().lower() in _TRUTHY


def _dump(value: object) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(value, indent=2, ensure_ascii=False)


def _coerce_value(store: EditStateStore, path: str, text: str) -> object:
    """Convert CLI text into the type the field's schema declares."""
    node = store.resolver.resolve_node(path, store.section_schema_ids())
    if not isinstance(node, FieldSchema):
        return text
    match node.type:
        case "number":
            try:
                return int(text)
            except ValueError:
                try:
                    return float(text)
                except ValueError:
                    msg = f"'{path}' expects a number, got {text!r}."
                    raise SystemExit(msg) from None
        case "boolean":
            return _is_truthy(text)
        case _:
            return text


@app.command(help="Render the draft preview page to HTML.")
def render(
    *,
    config: ConfigOption = DEFAULT_CONFIG,
    draft_dir: DraftDirOption = DEFAULT_DRAFT_DIR,
    page: PageOption = None,
    output: typ.Annotated[
        Path, Parameter(help="Where to write the preview HTML")
    ] = DEFAULT_OUTPUT,
) -> None:
    """Render every enabled section with its pending edits applied."""
    store = _open_session(config, draft_dir, page)
    written = SitePreviewBuilder(store, output=output).run()
    print(f"wrote {_format_path(written)}")


@app.command(help="List sections with pending edits applied.")
def sections(
    *,
    config: ConfigOption = DEFAULT_CONFIG,
    draft_dir: DraftDirOption = DEFAULT_DRAFT_DIR,
    page: PageOption = None,
) -> None:
    """Print one line per section: order, id, type, and enabled state."""
    store = _open_session(config, draft_dir, page)
    for section in store.list_sections():
        state = "enabled" if section.enabled else "disabled"
        print(f"{section.order:>4}  {section.id}  ({section.type}, {state})")


@app.command(help="List section types the picker offers.")
def types(
    *,
    config: ConfigOption = DEFAULT_CONFIG,
    draft_dir: DraftDirOption = DEFAULT_DRAFT_DIR,
    page: PageOption = None,
) -> None:
    """Print every available section type with its added/can-add status."""
    store = _open_session(config, draft_dir, page)
    for key, status in store.available_section_types().items():
        added = "added" if status.is_added else "available"
        can_add = "can add" if status.can_add else "cannot add"
        print(f"{key}: {status.display_name} [{added}, {can_add}]")


@app.command(help="Print the effective value at a dot-path.")
def get(
    path: str,
    *,
    config: ConfigOption = DEFAULT_CONFIG,
    draft_dir: DraftDirOption = DEFAULT_DRAFT_DIR,
    page: PageOption = None,
) -> None:
    """Print the value at ``path`` and whether it is editable."""
    store = _open_session(config, draft_dir, page)
    print(_dump(store.read(path)))
    print(f"editable: {'yes' if store.is_editable(path) else 'no'}")


@app.command(name="set", help="Write a value at an editable dot-path.")
def set_value(
    path: str,
    value: str,
    *,
    config: ConfigOption = DEFAULT_CONFIG,
    draft_dir: DraftDirOption = DEFAULT_DRAFT_DIR,
    page: PageOption = None,
) -> None:
    """Record ``value`` at ``path`` in the draft; refuse read-only fields."""
    store = _open_session(config, draft_dir, page)
    if not store.is_editable(path):
        msg = f"'{path}' is not editable."
        raise SystemExit(msg)
    store.write(path, _coerce_value(store, path, value))
    print(f"{path} updated ({store.change_count} pending)")


@app.command(help="Add a section of the given type.")
def add_section(
    section_type: str,
    *,
    position: typ.Annotated[
        int | None, Parameter(help="Insert at this index instead of appending")
    ] = None,
    config: ConfigOption = DEFAULT_CONFIG,
    draft_dir: DraftDirOption = DEFAULT_DRAFT_DIR,
    page: PageOption = None,
) -> None:
    """Add a section, respecting singleton types."""
    store = _open_session(config, draft_dir, page)
    added = store.add_section(section_type, position)
    if added is None:
        print(f"no change: cannot add section type '{section_type}'")
        return
    print(f"added {added.id} at order {added.order}")


@app.command(help="Remove a section by id.")
def remove_section(
    section_id: str,
    *,
    config: ConfigOption = DEFAULT_CONFIG,
    draft_dir: DraftDirOption = DEFAULT_DRAFT_DIR,
    page: PageOption = None,
) -> None:
    """Remove the section ``section_id`` from the draft."""
    store = _open_session(config, draft_dir, page)
    if store.remove_section(section_id):
        print(f"removed {section_id}")
    else:
        print(f"no change: no section '{section_id}'")


@app.command(help="Append a default item to an array field.")
def add_item(
    path: str,
    *,
    config: ConfigOption = DEFAULT_CONFIG,
    draft_dir: DraftDirOption = DEFAULT_DRAFT_DIR,
    page: PageOption = None,
) -> None:
    """Append one item unless the array is at its maximum size."""
    store = _open_session(config, draft_dir, page)
    if store.add_item(path):
        print(f"{path}: {len(store.read(path) or [])} items")
    else:
        print(f"no change: cannot add an item to '{path}'")


@app.command(help="Remove an item from an array field.")
def remove_item(
    path: str,
    index: int,
    *,
    config: ConfigOption = DEFAULT_CONFIG,
    draft_dir: DraftDirOption = DEFAULT_DRAFT_DIR,
    page: PageOption = None,
) -> None:
    """Remove the item at ``index`` from the array at ``path``."""
    store = _open_session(config, draft_dir, page)
    if store.remove_item(path, index):
        print(f"{path}: removed item {index}")
    else:
        print(f"no change: no item {index} in '{path}'")


@app.command(help="Move an array item to a new index.")
def move_item(
    path: str,
    from_index: int,
    to_index: int,
    *,
    config: ConfigOption = DEFAULT_CONFIG,
    draft_dir: DraftDirOption = DEFAULT_DRAFT_DIR,
    page: PageOption = None,
) -> None:
    """Move the item at ``from_index`` to ``to_index``."""
    store = _open_session(config, draft_dir, page)
    if store.move_item(path, from_index, to_index):
        print(f"{path}: moved item {from_index} to {to_index}")
    else:
        print(f"no change: cannot move {from_index} to {to_index} in '{path}'")


@app.command(help="Drop every pending edit.")
def discard(
    *,
    config: ConfigOption = DEFAULT_CONFIG,
    draft_dir: DraftDirOption = DEFAULT_DRAFT_DIR,
) -> None:
    """Forget the cached draft and restore the published content."""
    store = _open_session(config, draft_dir)
    count = store.change_count
    store.discard()
    print(f"discarded {count} pending edit(s)")


@app.command(help="Publish pending edits into the site config.")
def publish(
    *,
    config: ConfigOption = DEFAULT_CONFIG,
    draft_dir: DraftDirOption = DEFAULT_DRAFT_DIR,
) -> None:
    """Write the merged draft into the config's ``data`` block.

    A failed publish keeps the draft and exits with a non-zero status.
    """
    store = _open_session(config, draft_dir)
    if not store.has_changes:
        print("nothing to publish")
        return
    result = store.publish()
    if not result.ok:
        msg = f"publish failed: {result.error}"
        raise SystemExit(msg)
    print(f"published {result.published_fields} edit(s) to {_format_path(config)}")


@app.command(help="List blog posts or show one article from the content API.")
def blog(
    *,
    slug: typ.Annotated[str | None, Parameter(help="Article slug")] = None,
    site: typ.Annotated[
        str | None, Parameter(help="Site identifier (defaults to the config's)")
    ] = None,
    page_number: typ.Annotated[int, Parameter(help="Listing page")] = 1,
    page_size: typ.Annotated[int, Parameter(help="Posts per page")] = 10,
    api_base: typ.Annotated[
        str, Parameter(help="Content API base URL", env_var="PAGECRAFT_API_BASE")
    ] = BlogClient.default_api_base,
    config: ConfigOption = DEFAULT_CONFIG,
) -> None:
    """Fetch read-only blog content for the site."""
    site_id = site or load_site_config(config).site_id
    if not site_id:
        msg = "No site identifier: pass --site or set site_id in the config."
        raise SystemExit(msg)
    client = BlogClient(api_base=api_base, cache=BlogCache())
    try:
        if slug:
            _print_article(client, site_id, slug)
        else:
            _print_listing(client, site_id, page_number, page_size)
    except (BlogClientError, ValueError) as exc:
        msg = f"blog request failed: {exc}"
        raise SystemExit(msg) from exc


def _print_article(client: BlogClient, site_id: str, slug: str) -> None:
    article = client.fetch_post(site_id, slug)
    if article is None:
        msg = f"No article '{slug}' for {site_id}."
        raise SystemExit(msg)
    print(article.title)
    if article.published_at:
        print(article.published_at)
    print()
    print(article.content)


def _print_listing(
    client: BlogClient, site_id: str, page_number: int, page_size: int
) -> None:
    listing = client.list_posts(site_id, page=page_number, page_size=page_size)
    for post in listing.items:
        print(f"{post.slug}: {post.title}")
    print(f"{len(listing.items)} of {listing.total} post(s)")


def main() -> None:
    """Invoke the Cyclopts application that powers the `pagecraft` command.

    Set ``PAGECRAFT_VERBOSE=1`` to include debug logging.
    """
    log.setup(verbose=_is_truthy(os.getenv("PAGECRAFT_VERBOSE")))
    app()


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    main()
