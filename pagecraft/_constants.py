"""Common literal values used across pagecraft.

These constants keep cache keys and path namespaces centralized so the store,
the CLI, and tests can import the same values without drifting. Intended for
internal use within the pagecraft package.

Examples
--------
>>> from pagecraft import _constants
>>> _constants.DRAFT_KEY_TEMPLATE.format(site="summit-books")
'preview-summit-books'
>>> _constants.SECTIONS_NAMESPACE
'sections'
"""

DRAFT_KEY_TEMPLATE = "preview-{site}"
DEFAULT_SITE_ID = "default"
SECTIONS_NAMESPACE = "sections"
ORDER_STEP = 10
