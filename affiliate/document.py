"""Walk rendered post HTML and rewrite anchor targets."""
from __future__ import annotations

import logging
from typing import Callable, Iterable, MutableMapping

from bs4 import BeautifulSoup

from .processor import apply

logger = logging.getLogger(__name__)

ANCHOR_SELECTOR = "a[href]"


def rewrite_links(
    anchors: Iterable[MutableMapping[str, str]],
    rewrite: Callable[[str], str] = apply,
) -> int:
    """Pass every anchor ``href`` through ``rewrite`` and store changed values.

    Anchors only need item access for ``"href"``, so BeautifulSoup tags work as
    well as host supplied adapters. Returns the number of updated anchors.
    """

    changed = 0
    for anchor in anchors:
        original = anchor["href"]
        updated = rewrite(original)
        if updated != original:
            anchor["href"] = updated
            changed += 1
    return changed


def process_affiliate_links(doc: BeautifulSoup, rewrite: Callable[[str], str] = apply) -> int:
    """Rewrite affiliate links in place inside a parsed fragment."""

    changed = rewrite_links(doc.select(ANCHOR_SELECTOR), rewrite)
    if changed:
        logger.debug("Rewrote %s affiliate links", changed)
    return changed


def rewrite_html(fragment: str, rewrite: Callable[[str], str] = apply) -> str:
    """Return ``fragment`` with affiliate links rewritten."""

    if not fragment:
        return fragment
    doc = BeautifulSoup(fragment, "html.parser")
    if not process_affiliate_links(doc, rewrite):
        return fragment
    return str(doc)
