"""Static preview rendering for a site's draft.

This module turns the effective state of an :class:`EditStateStore` into one
HTML page: the enabled sections in render order, each leaf value annotated
with its dot-path and whether the schema allows editing it. The template
only displays what the store resolved; it never decides editability itself.
The main entry point is :class:`SitePreviewBuilder`.

Typical usage mirrors the CLI ``render`` command:

>>> builder = SitePreviewBuilder(store, output=Path("public/preview.html"))  # doctest: +SKIP
>>> builder.run()  # doctest: +SKIP
PosixPath('public/preview.html')
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import datetime as dt
import typing as typ
from pathlib import Path

from jinja2 import Environment, FileSystemLoader

from ._constants import SECTIONS_NAMESPACE

if typ.TYPE_CHECKING:
    from .config.models import Section
    from .store import EditStateStore

DEFAULT_OUTPUT = Path("public/preview.html")


@dc.dataclass(slots=True, frozen=True)
class FieldView:
    """A resolved value and its edit affordance."""

    path: str
    label: str
    value: str
    editable: bool


@dc.dataclass(slots=True, frozen=True)
class SectionView:
    """A section ready for display."""

    id: str
    type: str
    title: str
    order: int | float
    fields: list[FieldView]


def display_text(value: object) -> str:
    """Coerce any stored value into safe display text."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "yes" if value else "no"
    return str(value)


def enabled_sections(sections: cabc.Iterable[Section]) -> list[Section]:
    """Return enabled sections sorted by ``order``, ties kept in list order."""
    return sorted(
        (section for section in sections if section.enabled),
        key=lambda section: section.order,
    )


def field_views(
    store: EditStateStore, value: object, path: str, label: str
) -> list[FieldView]:
    """Flatten ``value`` into one view per leaf below ``path``.

    ``value`` supplies the shape; each leaf is read back through the store so
    pending edits are shown.
    """
    match value:
        case cabc.Mapping():
            views: list[FieldView] = []
            for key, child in value.items():
                views.extend(field_views(store, child, f"{path}.{key}", str(key)))
            return views
        case list():
            views = []
            for index, child in enumerate(value):
                views.extend(
                    field_views(store, child, f"{path}.{index}", f"{label} #{index + 1}")
                )
            return views
        case _:
            return [
                FieldView(
                    path=path,
                    label=label,
                    value=display_text(store.read(path)),
                    editable=store.is_editable(path),
                )
            ]


class SitePreviewBuilder:
    """Render the draft preview page from an edit-state store."""

    def __init__(
        self,
        store: EditStateStore,
        *,
        output: Path = DEFAULT_OUTPUT,
        templates_dir: Path | None = None,
    ) -> None:
        """Initialize the builder and Jinja environment.

        Parameters
        ----------
        store : EditStateStore
            Session providing resolved values and editability.
        output : Path, optional
            Where :meth:`run` writes the page.
        templates_dir : Path, optional
            Directory containing Jinja templates. Defaults to
            ``pagecraft/templates``.
        """
        self.store = store
        self.output = output
        self.templates_dir = templates_dir or Path(__file__).parent / "templates"
        self.env = Environment(
            loader=FileSystemLoader(self.templates_dir),
            autoescape=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.template = self.env.get_template("preview_page.jinja")

    def context(self) -> dict[str, typ.Any]:
        """Return the template context for the current draft."""
        store = self.store
        sections: list[SectionView] = []
        for section in enabled_sections(store.list_sections()):
            entry = store.schema.get_section_type(section.type)
            sections.append(
                SectionView(
                    id=section.id,
                    type=section.type,
                    title=entry.display_name if entry else section.type,
                    order=section.order,
                    fields=field_views(
                        store,
                        section.data,
                        f"{SECTIONS_NAMESPACE}.{section.id}",
                        section.id,
                    ),
                )
            )
        site_fields = [
            *field_views(store, store.read("site") or {}, "site", "site"),
            *field_views(store, store.read("features") or {}, "features", "features"),
        ]
        return {
            "site_fields": site_fields,
            "sections": sections,
            "change_count": store.change_count,
            "draft_key": store.draft_key,
            "generated_at": dt.datetime.now(dt.UTC),
        }

    def render(self) -> str:
        """Return the rendered HTML, always ending with a newline."""
        html = self.template.render(**self.context())
        if not html.endswith("\n"):
            html += "\n"
        return html

    def run(self) -> Path:
        """Render and write the preview HTML, returning the output path."""
        self.output.parent.mkdir(parents=True, exist_ok=True)
        self.output.write_text(self.render(), encoding="utf-8")
        return self.output


__all__ = [
    "FieldView",
    "SectionView",
    "SitePreviewBuilder",
    "display_text",
    "enabled_sections",
    "field_views",
]
