"""Rewrite a single URL so that supported merchant links carry an affiliate code."""
from __future__ import annotations

import logging
from typing import Callable
from urllib.parse import urlsplit

from . import shortlinks
from .rules import find_rule

logger = logging.getLogger(__name__)

REWRITABLE_SCHEMES = {"http", "https"}
MAX_EXPANSIONS = 1


def apply(
    url: str,
    *,
    expand: Callable[[str], str] | None = None,
    max_expansions: int = MAX_EXPANSIONS,
) -> str:
    """Return ``url`` with the matching merchant rule applied.

    Short links are expanded first (at most ``max_expansions`` hops) so the real
    merchant host can be matched. Any failure leaves the URL untouched.
    """

    if not isinstance(url, str):
        return url
    try:
        return _apply(url, expand or shortlinks.expand, max_expansions)
    except Exception as exc:
        logger.warning("Failed to process affiliate URL %s: %s", url, exc)
        return url


def _apply(url: str, expand: Callable[[str], str], expansions_left: int) -> str:
    parts = urlsplit(url)
    if parts.scheme not in REWRITABLE_SCHEMES:
        return url
    host = parts.hostname
    if expansions_left > 0 and shortlinks.is_short_link_host(host):
        expanded = expand(url)
        if expanded != url:
            return _apply(expanded, expand, expansions_left - 1)
    rule = find_rule(host)
    if rule is None:
        return url
    rewritten = rule.rewrite(url, parts)
    if rewritten != url:
        logger.debug("Rewrote %s to %s", url, rewritten)
    return rewritten
