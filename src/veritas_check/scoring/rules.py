"""Rule primitives shared by the email and URL rule sets."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
import re
from typing import Any, Generic, TypeVar

import idna
from rapidfuzz.distance import Levenshtein

from veritas_check.domain.models import Indicator
from veritas_check.policy.reference import KEYBOARD_NEIGHBORS, ReferenceData, VariantPolicy

F = TypeVar("F")

# Greek, Cyrillic, Cyrillic Supplement, Armenian.
NON_LATIN_SCRIPT = re.compile(r"[\u0370-\u03FF\u0400-\u04FF\u0500-\u052F\u0530-\u058F]")

SUBSTITUTION_PATTERNS: tuple[tuple[re.Pattern[str], str, str], ...] = (
    (re.compile(r"[a-z]0|0[a-z]"), "o/0", "g00gle"),
    (re.compile(r"[a-z]1|1[a-z]"), "i/l/1", "app1e"),
    (re.compile(r"5.*s|s.*5"), "s/5", "5ecure"),
    (re.compile(r"3.*e|e.*3"), "e/3", "3bay"),
)


@dataclass(frozen=True)
class RuleContext(Generic[F]):
    features: F
    reference: ReferenceData
    policy: VariantPolicy

    def hit(self, rule: str, description: str, weight: int | None = None) -> Indicator:
        return Indicator(
            rule=rule,
            description=description,
            weight=self.policy.weight(rule) if weight is None else weight,
        )


RuleCheck = Callable[[RuleContext[Any]], list[Indicator]]


@dataclass(frozen=True)
class RuleSpec:
    name: str
    check: RuleCheck


def rule_table(*checks: RuleCheck) -> tuple[RuleSpec, ...]:
    return tuple(RuleSpec(name=check.__name__.removeprefix("_rule_"), check=check) for check in checks)


def edit_distance(left: str, right: str) -> int:
    return int(Levenshtein.distance(left, right))


def decode_idna(host: str) -> str:
    try:
        return idna.decode(host)
    except (idna.IDNAError, UnicodeError, ValueError):
        return host


def lookalike_hits(candidates: tuple[str, ...], reference: ReferenceData) -> list[str]:
    """Legitimate domains whose curated typo set contains any candidate."""

    hits: list[str] = []
    for legitimate, typos in reference.brands.items():
        if any(candidate in typos for candidate in candidates if candidate):
            hits.append(legitimate)
    return hits


def fuzzy_brand_hit(base_name: str, base_domain: str, reference: ReferenceData) -> tuple[str, int] | None:
    """First brand whose name is 1-2 edits away from ``base_name``."""

    if len(base_name) < 4 or reference.is_trusted_domain(base_domain):
        return None
    for _, brand in reference.brand_names:
        distance = edit_distance(base_name, brand)
        if 1 <= distance <= 2:
            return brand, distance
    return None


def keyboard_neighbor_hit(base_name: str, base_domain: str, reference: ReferenceData) -> tuple[str, str, str] | None:
    """First same-length brand differing by exactly one QWERTY-adjacent key."""

    if reference.is_trusted_domain(base_domain):
        return None
    for _, brand in reference.brand_names:
        if len(brand) != len(base_name):
            continue
        diffs = [(expected, actual) for expected, actual in zip(brand, base_name) if expected != actual]
        if len(diffs) != 1:
            continue
        expected, actual = diffs[0]
        if actual in KEYBOARD_NEIGHBORS.get(expected, frozenset()):
            return brand, expected, actual
    return None


def substitution_hits(base_domain: str) -> list[tuple[str, str]]:
    if not re.search(r"[a-z]", base_domain):
        return []
    return [(label, example) for pattern, label, example in SUBSTITUTION_PATTERNS if pattern.search(base_domain)]


def has_non_latin_script(text: str) -> bool:
    return NON_LATIN_SCRIPT.search(text or "") is not None
