"""Shared fixtures: a representative site schema and its published content."""

from __future__ import annotations

import copy
import typing as typ

import pytest
from ruamel.yaml import YAML

from pagecraft.cache import MemoryDraftCache
from pagecraft.config import parse_site_config
from pagecraft.store import EditStateStore

if typ.TYPE_CHECKING:
    from pathlib import Path

    from pagecraft.config import SiteConfig

SITE_SCHEMA: dict[str, typ.Any] = {
    "site": {
        "brand": {"type": "string", "editable": True},
        "city": {"type": "string", "editable": True},
        "slug": {"type": "string", "editable": False},
    },
    "features": {"blogEnabled": {"type": "boolean", "editable": False}},
    "sectionTypes": {
        "hero": {
            "displayName": "Hero",
            "singleton": True,
            "schemaId": "hero-main",
            "defaultData": {
                "shortHeadline": "Your Headline Here",
                "primaryCta": {"label": "Get Started", "href": "#contact"},
            },
        },
        "about": {"displayName": "About", "singleton": True, "schemaId": "about"},
        "services": {
            "displayName": "Services",
            "singleton": True,
            "schemaId": "services",
        },
        "testimonials": {
            "displayName": "Testimonials",
            "singleton": False,
            "schemaId": "testimonials",
        },
        "whyChooseUs": {
            "displayName": "Why Choose Us",
            "singleton": True,
            "schemaId": "why-choose-us",
        },
        "contact": {"displayName": "Contact", "singleton": True, "schemaId": "contact"},
        "serviceHero": {
            "displayName": "Service Hero",
            "singleton": True,
            "schemaId": "service-hero",
        },
    },
    "sections": {
        "hero-main": {
            "shortHeadline": {"type": "string", "editable": True, "maxLength": 80},
            "primaryCta": {
                "label": {"type": "string", "editable": True},
                "href": {"type": "string", "editable": False},
            },
            "heroImage": {"type": "image", "editable": True},
        },
        "about": {
            "title": {"type": "string", "editable": True},
            "credentials": {"type": "array", "editable": True},
        },
        "services": {
            "title": {"type": "string", "editable": True},
            "items": {
                "type": "array",
                "editable": True,
                "maxItems": 4,
                "itemSchema": {
                    "name": {"type": "string", "editable": True},
                    "description": {"type": "string", "editable": True},
                    "price": {"type": "string", "editable": True},
                    "image": {"type": "image", "editable": True},
                },
            },
        },
        "testimonials": {
            "items": {
                "type": "array",
                "editable": True,
                "itemSchema": {
                    "quote": {"type": "string", "editable": True},
                    "author": {"type": "string", "editable": True},
                },
            }
        },
        "why-choose-us": {
            "bullets": {
                "type": "array",
                "editable": True,
                "itemSchema": {"type": "string", "editable": True},
            }
        },
        "contact": {
            "phone": {"type": "string", "editable": True},
            "form": {
                "enabled": {"type": "boolean", "editable": False},
                "fields": {"type": "array", "editable": False},
            },
        },
    },
    "pages": {
        "service-detail": {
            "allowedSectionTypes": ["serviceHero", "contact"],
            "sections": {
                "service-hero": {"title": {"type": "string", "editable": True}},
            },
        }
    },
}

SITE_DATA: dict[str, typ.Any] = {
    "site": {"brand": "Summit Books & Tax", "city": "Seattle, WA", "slug": "summit"},
    "features": {"blogEnabled": True},
    "sections": [
        {
            "id": "hero-main",
            "type": "hero",
            "enabled": True,
            "order": 10,
            "data": {
                "shortHeadline": "Stress-Free Bookkeeping",
                "primaryCta": {"label": "Book a Call", "href": "#contact"},
                "heroImage": "/accountant.png",
            },
        },
        {
            "id": "about",
            "type": "about",
            "enabled": True,
            "order": 20,
            "data": {
                "title": "About Summit",
                "credentials": ["QuickBooks ProAdvisor", "Xero Certified"],
            },
        },
        {
            "id": "services",
            "type": "services",
            "enabled": False,
            "order": 30,
            "data": {
                "title": "Services",
                "items": [
                    {"name": "A", "description": "", "price": "$1", "image": ""},
                    {"name": "B", "description": "", "price": "$2", "image": ""},
                    {"name": "C", "description": "", "price": "$3", "image": ""},
                    {"name": "D", "description": "", "price": "$4", "image": ""},
                ],
            },
        },
        {
            "id": "contact",
            "type": "contact",
            "enabled": True,
            "order": 40,
            "data": {
                "phone": "(206) 555-0101",
                "form": {
                    "enabled": True,
                    "fields": [{"name": "email", "label": "Email"}],
                },
            },
        },
    ],
}


def site_payload() -> dict[str, typ.Any]:
    """Return a fresh copy of the full config document."""
    return {
        "site_id": "summit",
        "schema": copy.deepcopy(SITE_SCHEMA),
        "data": copy.deepcopy(SITE_DATA),
    }


@pytest.fixture
def payload() -> dict[str, typ.Any]:
    """Provide a mutable config document for tests that tweak it."""
    return site_payload()


@pytest.fixture
def site_config() -> SiteConfig:
    """Provide the parsed sample site config."""
    return parse_site_config(site_payload())


@pytest.fixture
def draft_cache() -> MemoryDraftCache:
    """Provide an empty in-memory draft cache."""
    return MemoryDraftCache()


@pytest.fixture
def store(site_config: SiteConfig, draft_cache: MemoryDraftCache) -> EditStateStore:
    """Provide an editing session over the sample site."""
    return EditStateStore.from_config(site_config, cache=draft_cache)


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    """Write the sample config as YAML and return its path."""
    path = tmp_path / "site.yaml"
    yaml = YAML()
    with path.open("w", encoding="utf-8") as handle:
        yaml.dump(site_payload(), handle)
    return path
