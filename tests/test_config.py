"""Tests for loading and validating the site configuration."""

from __future__ import annotations

import typing as typ
from textwrap import dedent

import pytest

from pagecraft.cache import draft_key_for
from pagecraft.config import (
    FieldSchema,
    SiteConfigError,
    load_site_config,
    parse_site_config,
)

if typ.TYPE_CHECKING:
    from pathlib import Path


def test_load_site_config_reads_schema_and_data(config_file: Path) -> None:
    """The YAML document should populate schema, data, and the site id."""
    config = load_site_config(config_file)

    assert config.site_id == "summit", f"expected site id 'summit', got {config.site_id!r}"
    key = draft_key_for(config.site_id)
    assert key == "preview-summit", f"expected draft key 'preview-summit', got {key!r}"
    assert config.source == config_file, "expected source path to be recorded"
    ids = [section.id for section in config.data.sections]
    assert ids == ["hero-main", "about", "services", "contact"], (
        f"expected sections in document order, got {ids!r}"
    )
    hero = config.schema.get_section_type("hero")
    assert hero is not None, "expected the hero section type to be registered"
    assert hero.schema_id == "hero-main", f"unexpected schema id {hero.schema_id!r}"
    assert hero.singleton is True, "expected hero to be a singleton"


def test_field_schema_parses_constraints(site_config: typ.Any) -> None:
    """CamelCase constraint keys map onto FieldSchema attributes."""
    items = site_config.schema.sections["services"]["items"]
    assert isinstance(items, FieldSchema), "expected items to be a field schema"
    assert items.max_items == 4, f"expected maxItems 4, got {items.max_items!r}"
    assert isinstance(items.item_schema, dict), "expected a compound item schema"
    headline = site_config.schema.sections["hero-main"]["shortHeadline"]
    assert headline.max_length == 80, f"expected maxLength 80, got {headline.max_length!r}"


def test_snake_case_keys_are_accepted() -> None:
    """Hand-written configs may use snake_case keys."""
    config = parse_site_config(
        {
            "schema": {
                "section_types": {
                    "faq": {"display_name": "FAQ", "schema_id": "faq", "singleton": True}
                },
                "sections": {
                    "faq": {
                        "items": {
                            "type": "array",
                            "max_items": 3,
                            "item_schema": {"type": "string", "editable": True},
                        }
                    }
                },
            }
        }
    )
    entry = config.schema.get_section_type("faq")
    assert entry is not None, "expected the faq section type to load"
    assert entry.display_name == "FAQ", f"unexpected display name {entry.display_name!r}"
    items = config.schema.sections["faq"]["items"]
    assert items.max_items == 3, f"expected max_items 3, got {items.max_items!r}"


def test_missing_data_defaults_to_empty_baseline() -> None:
    """A config without a data block yields empty site data."""
    config = parse_site_config({"schema": {}})
    assert config.data.sections == [], "expected no sections"
    assert config.data.site == {}, "expected empty site fields"
    key = draft_key_for(config.site_id)
    assert key == "preview-default", f"expected default draft key, got {key!r}"


def test_section_order_defaults_from_position() -> None:
    """Sections without an order get ``(position + 1) * 10``."""
    config = parse_site_config(
        {
            "data": {
                "sections": [
                    {"id": "a", "type": "x"},
                    {"id": "b", "type": "x", "order": 5, "enabled": False},
                ]
            }
        }
    )
    first, second = config.data.sections
    assert first.order == 10, f"expected default order 10, got {first.order!r}"
    assert first.enabled is True, "expected sections to default to enabled"
    assert second.order == 5, f"expected explicit order 5, got {second.order!r}"
    assert second.enabled is False, "expected explicit enabled: false to stick"


@pytest.mark.parametrize(
    ("payload", "fragment"),
    [
        (
            {"schema": {"sections": {"s": {"f": {"type": "colour"}}}}},
            "unknown type",
        ),
        (
            {
                "schema": {
                    "sections": {
                        "s": {"f": {"type": "string", "itemSchema": {"type": "string"}}}
                    }
                }
            },
            "not an array",
        ),
        (
            {"schema": {"sectionTypes": {"x": {"schemaId": "missing"}}}},
            "unknown schema",
        ),
        (
            {"schema": {"sections": {"s": {"f": {"type": "array", "maxItems": -1}}}}},
            "non-negative",
        ),
        (
            {"data": {"sections": [{"id": "a", "type": "x"}, {"id": "a", "type": "y"}]}},
            "Duplicate section id",
        ),
        ({"data": {"sections": [{"type": "x"}]}}, "requires 'id'"),
        ({"data": {"sections": {"id": "a"}}}, "must be a list"),
        ({"data": {"site": ["brand"]}}, "must be a mapping"),
        (
            {"schema": {"pages": {"p": {"allowedSectionTypes": "hero"}}}},
            "must be a list",
        ),
    ],
)
def test_invalid_documents_raise_site_config_error(
    payload: dict[str, typ.Any], fragment: str
) -> None:
    """Malformed schema or data blocks are rejected with a clear message."""
    with pytest.raises(SiteConfigError, match=fragment):
        parse_site_config(payload)


def test_repeated_singleton_is_rejected(payload: dict[str, typ.Any]) -> None:
    """Two sections of one singleton type cannot coexist in the baseline."""
    payload["data"]["sections"].append(
        {"id": "hero-2", "type": "hero", "data": {}}
    )
    with pytest.raises(SiteConfigError, match="more than once"):
        parse_site_config(payload)


def test_load_site_config_missing_file(tmp_path: Path) -> None:
    """A missing config file raises FileNotFoundError."""
    with pytest.raises(FileNotFoundError):
        load_site_config(tmp_path / "absent.yaml")


def test_load_site_config_accepts_json(tmp_path: Path) -> None:
    """JSON documents load through the YAML 1.2 loader unchanged."""
    path = tmp_path / "site.json"
    path.write_text(
        dedent(
            """
            {"site_id": "demo",
             "data": {"site": {"brand": "Demo"}, "sections": []}}
            """
        ).strip(),
        encoding="utf-8",
    )
    config = load_site_config(path)
    assert config.data.site == {"brand": "Demo"}, (
        f"expected brand from JSON, got {config.data.site!r}"
    )


def test_page_schema_takes_precedence(site_config: typ.Any) -> None:
    """Page-scoped schemas are found only when the page is requested."""
    schema = site_config.schema
    assert schema.section_schema("service-hero") is None, (
        "expected page schema to be hidden without a page type"
    )
    assert schema.section_schema("service-hero", page_type="service-detail"), (
        "expected page schema to resolve for service-detail"
    )
    assert schema.allowed_section_types("service-detail") == ("serviceHero", "contact"), (
        "expected the page allow-list to be a tuple of type keys"
    )
    assert schema.allowed_section_types(None) is None, "expected no home allow-list"
