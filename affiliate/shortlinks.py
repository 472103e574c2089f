"""Expand Amazon short links to canonical product URLs."""
from __future__ import annotations

import logging
import re
from typing import FrozenSet, Optional
from urllib.parse import urljoin, urlsplit

import requests

from .settings import SHORTLINK_TIMEOUT_SETTING, setting_float

logger = logging.getLogger(__name__)

AMAZON_SHORT_DOMAINS: FrozenSet[str] = frozenset({"amzn.to", "amzn.com", "amzn.eu", "amzn.in", "a.co"})
EXPECTED_STATUSES: FrozenSet[int] = frozenset({200, 301, 302, 303, 307, 308})
DEFAULT_TIMEOUT = 10.0

USER_AGENT = "Mozilla/5.0 (compatible; AffiliateLinkBot/1.0)"
HEADERS = {
    "User-Agent": USER_AGENT,
    "Accept-Language": "en-US,en;q=0.9",
}
ASIN_PATH_RE = re.compile(r"/dp/([A-Z0-9]{10})|/gp/product/([A-Z0-9]{10})")


class ShortLinkError(RuntimeError):
    """Raised when a short link redirect chain ends on an unexpected response."""


def is_short_link_host(host: str | None) -> bool:
    return host in AMAZON_SHORT_DOMAINS


def canonical_product_url(url: str) -> str:
    """Reduce an Amazon product URL to ``https://<host>/dp/<ASIN>`` when possible."""

    parts = urlsplit(url)
    host = parts.hostname or ""
    if "amazon." not in host:
        return url
    match = ASIN_PATH_RE.search(parts.path)
    if not match:
        return url
    asin = match.group(1) or match.group(2)
    return f"https://{host}/dp/{asin}"


class ShortLinkResolver:
    """Follow short link redirects with a HEAD request.

    Without an injected session every expansion opens its own ``requests.Session``
    so cookies and connections never leak between posts or threads.
    """

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        *,
        timeout: float | None = None,
    ) -> None:
        self._session = session
        self.timeout = timeout

    def _timeout(self) -> float:
        if self.timeout is not None:
            return self.timeout
        return setting_float(SHORTLINK_TIMEOUT_SETTING, DEFAULT_TIMEOUT)

    def final_url(self, url: str) -> str:
        if self._session is not None:
            return self._final_url(self._session, url)
        with requests.Session() as session:
            return self._final_url(session, url)

    def _final_url(self, session: requests.Session, url: str) -> str:
        response = session.head(
            url,
            allow_redirects=True,
            headers=HEADERS,
            timeout=self._timeout(),
        )
        if response.status_code not in EXPECTED_STATUSES:
            raise ShortLinkError(f"Unexpected status {response.status_code} for {url}")
        landed = response.url or url
        location = response.headers.get("Location")
        if location:
            return urljoin(landed, location)
        # requests already followed the chain; the final response rarely carries
        # Location, so the landing URL is the destination, not the short link.
        return landed

    def expand(self, url: str) -> str:
        """Return the canonical destination of ``url`` or ``url`` itself on failure."""

        try:
            final = self.final_url(url)
            expanded = canonical_product_url(final)
        except (requests.RequestException, ShortLinkError, ValueError) as exc:
            logger.warning("Failed to expand Amazon short link %s: %s", url, exc)
            return url
        except Exception as exc:
            logger.warning("Unexpected error expanding Amazon short link %s: %r", url, exc)
            return url
        if expanded != url:
            logger.debug("Expanded short link %s to %s", url, expanded)
        return expanded


_default_resolver = ShortLinkResolver()


def default_resolver() -> ShortLinkResolver:
    return _default_resolver


def expand(url: str) -> str:
    return default_resolver().expand(url)
