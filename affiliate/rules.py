"""Hostname keyed rewrite rules for supported merchants."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Tuple, Union
from urllib.parse import SplitResult, parse_qsl, urlencode, urlunsplit

from .settings import get_setting

logger = logging.getLogger(__name__)

AMAZON_SUFFIXES: Tuple[str, ...] = (
    "com",
    "com.au",
    "com.br",
    "com.mx",
    "ca",
    "cn",
    "co.jp",
    "co.uk",
    "de",
    "es",
    "fr",
    "in",
    "it",
    "nl",
    "to",
    "co",
    "eu",
)

AMAZON_HOST_PREFIXES: Tuple[str, ...] = ("", "www.", "smile.")

LDLC_HOSTS: Tuple[str, ...] = ("www.ldlc.com", "ldlc.com")
LDLC_SETTING = "affiliate_ldlc_com"

# (parameter, other parameters that must also be present in the original query)
AMAZON_CARRIED_PARAMS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("k", ()),
    ("ref", ("k",)),
    ("node", ()),
)


def amazon_setting(suffix: str) -> str:
    """Return the configuration key holding the Amazon code for ``suffix``."""

    return f"affiliate_amazon_{suffix.replace('.', '_')}"


def _present(value: str | None) -> bool:
    return bool(value and value.strip())


@dataclass(frozen=True)
class QueryRule:
    """Put the affiliate tag first and keep only whitelisted query parameters."""

    setting: str
    tag_param: str = "tag"
    carried: Tuple[Tuple[str, Tuple[str, ...]], ...] = AMAZON_CARRIED_PARAMS

    def rewrite(self, url: str, parts: SplitResult) -> str:
        code = get_setting(self.setting)
        if not code:
            return url
        original = dict(parse_qsl(parts.query, keep_blank_values=True))
        query = [(self.tag_param, code)]
        for name, requires in self.carried:
            if not _present(original.get(name)):
                continue
            if all(_present(original.get(other)) for other in requires):
                query.append((name, original[name]))
        return urlunsplit(parts._replace(query=urlencode(query)))


@dataclass(frozen=True)
class FragmentRule:
    """Replace the URL fragment with the affiliate code."""

    setting: str

    def rewrite(self, url: str, parts: SplitResult) -> str:
        code = get_setting(self.setting)
        if not code:
            return url
        return urlunsplit(parts._replace(fragment=code))


Rule = Union[QueryRule, FragmentRule]


def build_rules() -> Mapping[str, Rule]:
    """Construct a fresh, read-only rule table."""

    table: dict[str, Rule] = {}
    for suffix in AMAZON_SUFFIXES:
        rule = QueryRule(amazon_setting(suffix))
        for prefix in AMAZON_HOST_PREFIXES:
            table[f"{prefix}amazon.{suffix}"] = rule
        if suffix == "com":
            table["amzn.com"] = rule
        elif suffix == "eu":
            table["amzn.eu"] = rule
        elif suffix == "in":
            table["amzn.in"] = QueryRule(amazon_setting("in"))
        elif suffix == "to":
            # amzn.to and a.co are US short domains, not storefronts of their own
            table["amzn.to"] = QueryRule(amazon_setting("com"))
        elif suffix == "co":
            table["a.co"] = QueryRule(amazon_setting("com"))

    ldlc = FragmentRule(LDLC_SETTING)
    for host in LDLC_HOSTS:
        table[host] = ldlc
    return MappingProxyType(table)


_RULES: Mapping[str, Rule] | None = None


def rules() -> Mapping[str, Rule]:
    """Return the process-wide rule table, building it on first use.

    Concurrent first calls may each build a table; only the first one published
    is kept and the others are discarded, so callers always see a complete table.
    """

    global _RULES
    table = _RULES
    if table is None:
        built = build_rules()
        if _RULES is None:
            _RULES = built
            logger.debug("Built affiliate rule table with %s hosts", len(built))
        table = _RULES
    return table


def find_rule(host: str | None) -> Rule | None:
    if not host:
        return None
    return rules().get(host)
