r"""Client for the external blog content service.

Blog listings and articles are read-only content served per site by an HTTP
API; they feed the blog pages and teaser cards but never pass through the
edit-state store. Responses can be memoized in a caller-owned
:class:`BlogCache` so repeated renders do not refetch.

Example
-------
>>> from pagecraft.blog import BlogClient
>>> client = BlogClient(api_base="http://localhost:8000")  # doctest: +SKIP
>>> listing = client.list_posts("summit-books", page_size=3)  # doctest: +SKIP
>>> [post.slug for post in listing.items]  # doctest: +SKIP
['quarterly-taxes', 'bookkeeping-basics', 'payroll-checklist']
"""

from __future__ import annotations

import dataclasses as dc
import logging
import typing as typ
from http import HTTPStatus

import requests

DEFAULT_API_BASE = "http://localhost:8000"

logger = logging.getLogger(__name__)


class BlogClientError(RuntimeError):
    """Raised when the blog API returns an unexpected error response."""


@dc.dataclass(slots=True)
class BlogPostSummary:
    """One entry of a blog listing."""

    slug: str
    title: str
    excerpt: str | None = None
    published_at: str | None = None
    cover_image_url: str | None = None


@dc.dataclass(slots=True)
class BlogListing:
    """A page of published posts and the total number available."""

    items: list[BlogPostSummary]
    total: int


@dc.dataclass(slots=True)
class BlogArticle:
    """Full article body as served by the content service (HTML)."""

    slug: str
    title: str
    content: str
    published_at: str | None = None
    cover_image_url: str | None = None


CacheKey: typ.TypeAlias = tuple[str, str, str | None, int, int]


class BlogCache:
    """Caller-owned memo of blog responses keyed by request parameters."""

    def __init__(self) -> None:
        self._entries: dict[CacheKey, BlogListing | BlogArticle | None] = {}

    def __contains__(self, key: CacheKey) -> bool:
        return key in self._entries

    def get(self, key: CacheKey) -> BlogListing | BlogArticle | None:
        return self._entries.get(key)

    def put(self, key: CacheKey, value: BlogListing | BlogArticle | None) -> None:
        self._entries[key] = value

    def clear(self) -> None:
        self._entries.clear()


class BlogClient:
    """Thin wrapper around the per-site blog endpoints.

    Listings come from ``/api/sites/:site/blogs`` and articles from
    ``/api/sites/:site/blogs/:slug``. Pass a :class:`BlogCache` to reuse
    responses across calls.
    """

    default_api_base = DEFAULT_API_BASE

    def __init__(
        self,
        *,
        api_base: str = DEFAULT_API_BASE,
        session: requests.Session | None = None,
        timeout: float = 10.0,
        cache: BlogCache | None = None,
    ) -> None:
        """Initialise the client with an optional transport and cache.

        Parameters
        ----------
        api_base : str, optional
            Base URL of the content service. Defaults to ``DEFAULT_API_BASE``.
        session : requests.Session, optional
            Preconfigured session to reuse connections. Defaults to a new
            session per client.
        timeout : float, optional
            Per-request timeout in seconds. Defaults to ``10.0``.
        cache : BlogCache, optional
            Response memo owned by the caller. No caching when omitted.
        """
        self._api_base = api_base.rstrip("/") or DEFAULT_API_BASE
        self._session = session or requests.Session()
        self.timeout = timeout
        self.cache = cache
        self._headers = {
            "Accept": "application/json",
            "User-Agent": "pagecraft/0.1",
        }

    def list_posts(
        self, site_id: str, *, page: int = 1, page_size: int = 10
    ) -> BlogListing:
        """Return one page of published posts for ``site_id``."""
        key: CacheKey = ("list", site_id, None, page, page_size)
        if self.cache is not None and key in self.cache:
            return typ.cast("BlogListing", self.cache.get(key))

        payload = self._get_json(
            f"/api/sites/{_require_site(site_id)}/blogs",
            params={"status": "published", "page": page, "pageSize": page_size},
        )
        raw_items = payload.get("items") if isinstance(payload, dict) else None
        items = [
            summary
            for entry in raw_items or []
            if (summary := _build_summary(entry)) is not None
        ]
        total = payload.get("total") if isinstance(payload, dict) else None
        listing = BlogListing(
            items=items, total=total if isinstance(total, int) else len(items)
        )
        if self.cache is not None:
            self.cache.put(key, listing)
        return listing

    def fetch_post(self, site_id: str, slug: str) -> BlogArticle | None:
        """Return the article ``slug`` or None when the service has no such post."""
        normalized = slug.strip()
        if not normalized:
            msg = "Article slug cannot be empty"
            raise ValueError(msg)
        key: CacheKey = ("detail", site_id, normalized, 0, 0)
        if self.cache is not None and key in self.cache:
            return typ.cast("BlogArticle | None", self.cache.get(key))

        payload = self._get_json(
            f"/api/sites/{_require_site(site_id)}/blogs/{normalized}",
            missing_ok=True,
        )
        article = _build_article(payload, normalized) if payload is not None else None
        if self.cache is not None:
            self.cache.put(key, article)
        return article

    def _get_json(
        self,
        path: str,
        *,
        params: dict[str, typ.Any] | None = None,
        missing_ok: bool = False,
    ) -> typ.Any:
        url = f"{self._api_base}{path}"
        logger.debug("Fetching %s", url)
        try:
            response = self._session.get(
                url, params=params, headers=self._headers, timeout=self.timeout
            )
        except requests.RequestException as exc:
            msg = f"Failed to reach blog service at '{url}': {exc}"
            raise BlogClientError(msg) from exc

        if missing_ok and response.status_code == HTTPStatus.NOT_FOUND:
            return None
        if response.status_code >= HTTPStatus.BAD_REQUEST:
            snippet = response.text[:200]
            msg = (
                f"Blog request '{path}' failed with status "
                f"{response.status_code}: {snippet}"
            )
            raise BlogClientError(msg)

        try:
            return response.json()
        except ValueError as exc:
            msg = f"Blog response for '{path}' was not valid JSON"
            raise BlogClientError(msg) from exc


def _require_site(site_id: str) -> str:
    normalized = site_id.strip()
    if not normalized:
        msg = "Site identifier cannot be empty"
        raise ValueError(msg)
    return normalized


def _build_summary(entry: object) -> BlogPostSummary | None:
    match entry:
        case {"slug": str(slug), "title": str(title), **rest} if slug:
            return BlogPostSummary(
                slug=slug,
                title=title,
                excerpt=_coerce_str(rest.get("excerpt")),
                published_at=_coerce_str(rest.get("publishedAt")),
                cover_image_url=_coerce_str(rest.get("coverImageUrl")),
            )
        case _:
            return None


def _build_article(payload: object, slug: str) -> BlogArticle:
    if not isinstance(payload, dict):
        msg = f"Blog article '{slug}' payload must be an object"
        raise BlogClientError(msg)
    return BlogArticle(
        slug=_coerce_str(payload.get("slug")) or slug,
        title=_coerce_str(payload.get("title")) or slug,
        content=_coerce_str(payload.get("content")) or "",
        published_at=_coerce_str(payload.get("publishedAt")),
        cover_image_url=_coerce_str(payload.get("coverImageUrl")),
    )


def _coerce_str(value: object) -> str | None:
    """Return the string representation of ``value`` or None."""
    if value is None:
        return None
    if isinstance(value, str):
        return value
    return str(value)


__all__ = [
    "BlogArticle",
    "BlogCache",
    "BlogClient",
    "BlogClientError",
    "BlogListing",
    "BlogPostSummary",
]
