"""Load and validate the site schema and baseline content for pagecraft.

This subpackage parses the project's ``site.yaml`` (or an equivalent JSON
export) and produces strongly typed dataclasses (:class:`SiteConfig`,
:class:`SiteSchema`, :class:`SiteData`, etc.) that the edit-state store,
renderer, and CLI consume. The primary entry point is
:func:`load_site_config`, which validates field types, section ids, and
singleton constraints before returning a :class:`SiteConfig`.

Examples
--------
>>> from pathlib import Path
>>> from pagecraft.config import load_site_config
>>> site = load_site_config(Path("config/site.yaml"))  # doctest: +SKIP
>>> site.schema.get_section_type("hero").schema_id  # doctest: +SKIP
'hero-main'
"""

from .loader import build_sections, load_site_config, parse_site_config
from .models import (
    FIELD_TYPES,
    CompoundSchema,
    FieldSchema,
    PageSchema,
    SchemaNode,
    Section,
    SectionTypeConfig,
    SiteConfig,
    SiteConfigError,
    SiteData,
    SiteSchema,
)

__all__ = [
    "FIELD_TYPES",
    "CompoundSchema",
    "FieldSchema",
    "PageSchema",
    "SchemaNode",
    "Section",
    "SectionTypeConfig",
    "SiteConfig",
    "SiteConfigError",
    "SiteData",
    "SiteSchema",
    "build_sections",
    "load_site_config",
    "parse_site_config",
]
