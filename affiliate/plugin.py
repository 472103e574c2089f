"""Hooks wired into the host's post rendering lifecycle."""
from __future__ import annotations

import logging
from typing import Any, Callable, List, Tuple

from bs4 import BeautifulSoup

from .document import process_affiliate_links
from .settings import is_enabled

logger = logging.getLogger(__name__)

POST_PROCESS_COOKED = "post_process_cooked"
BEFORE_POST_PROCESS_COOKED = "before_post_process_cooked"

Handler = Callable[[BeautifulSoup, Any], bool]


def _process(doc: BeautifulSoup) -> None:
    if not is_enabled():
        return
    process_affiliate_links(doc)


def on_post_process_cooked(doc: BeautifulSoup, post: Any = None) -> bool:
    """Rewrite links when a post is created or edited."""

    _process(doc)
    return True


def on_before_post_process_cooked(doc: BeautifulSoup, post: Any = None) -> bool:
    """Rewrite links again when a post is rebaked."""

    _process(doc)
    return True


HOOKS: Tuple[Tuple[str, Handler], ...] = (
    (POST_PROCESS_COOKED, on_post_process_cooked),
    (BEFORE_POST_PROCESS_COOKED, on_before_post_process_cooked),
)


def register(on: Callable[[str, Handler], Any]) -> List[Tuple[str, Handler]]:
    """Register both lifecycle hooks through the host's ``on(event, handler)``."""

    registered = []
    for event, handler in HOOKS:
        on(event, handler)
        registered.append((event, handler))
    logger.debug("Registered affiliate hooks: %s", ", ".join(event for event, _ in registered))
    return registered
