"""Process-wide, read-only reference tables for the heuristic rule sets."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from functools import lru_cache
import logging
from pathlib import Path
from types import MappingProxyType
from typing import Any

import yaml

from veritas_check.core.errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_REFERENCE_PATH = Path(__file__).resolve().with_name("reference.yaml")

_QWERTY_ROWS = ("qwertyuiop", "asdfghjkl", "zxcvbnm")


def _build_keyboard_neighbors() -> Mapping[str, frozenset[str]]:
    positions = {
        char: (row_index, col_index)
        for row_index, row in enumerate(_QWERTY_ROWS)
        for col_index, char in enumerate(row)
    }
    neighbors: dict[str, frozenset[str]] = {}
    for char, (row, col) in positions.items():
        adjacent = {
            other
            for other, (other_row, other_col) in positions.items()
            if other != char and abs(other_row - row) <= 1 and abs(other_col - col) <= 1
        }
        neighbors[char] = frozenset(adjacent)
    return MappingProxyType(neighbors)


KEYBOARD_NEIGHBORS = _build_keyboard_neighbors()


@dataclass(frozen=True)
class VariantPolicy:
    """Thresholds, weights and word lists for one identifier variant."""

    suspicious_tlds: frozenset[str]
    suspicious_keywords: tuple[str, ...]
    thresholds: Mapping[str, int]
    weights: Mapping[str, int]
    lists: Mapping[str, tuple[str, ...]]

    def weight(self, rule: str) -> int:
        try:
            return self.weights[rule]
        except KeyError as exc:
            raise ConfigError(f"No weight configured for rule '{rule}'.") from exc

    def threshold(self, band: str) -> int:
        try:
            return self.thresholds[band]
        except KeyError as exc:
            raise ConfigError(f"No threshold configured for band '{band}'.") from exc

    def words(self, name: str) -> tuple[str, ...]:
        return self.lists.get(name, ())


@dataclass(frozen=True)
class ReferenceData:
    brands: Mapping[str, frozenset[str]]
    disposable_domains: frozenset[str]
    free_email_domains: frozenset[str]
    corporate_keywords: tuple[str, ...]
    shortener_domains: tuple[str, ...]
    email: VariantPolicy
    url: VariantPolicy

    @property
    def brand_names(self) -> tuple[tuple[str, str], ...]:
        """(legitimate domain, brand name) pairs in table order."""
        return tuple((domain, domain.split(".")[0]) for domain in self.brands)

    def is_trusted_domain(self, base_domain: str) -> bool:
        return base_domain in self.brands or base_domain in self.free_email_domains

    def is_shortener_host(self, host: str) -> bool:
        return any(host == item or host.endswith(f".{item}") for item in self.shortener_domains)


def _as_words(raw: Any, *, field: str) -> tuple[str, ...]:
    if raw is None:
        return ()
    if not isinstance(raw, list):
        raise ConfigError(f"Reference field '{field}' must be a list.")
    return tuple(dict.fromkeys(str(item).strip().lower() for item in raw if str(item).strip()))


def _as_int_map(raw: Any, *, field: str) -> Mapping[str, int]:
    if not isinstance(raw, dict) or not raw:
        raise ConfigError(f"Reference field '{field}' must be a non-empty mapping.")
    try:
        return MappingProxyType({str(key): int(value) for key, value in raw.items()})
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Reference field '{field}' must map names to integers.") from exc


def _variant_policy(raw: Any, *, name: str) -> VariantPolicy:
    if not isinstance(raw, dict):
        raise ConfigError(f"Reference section '{name}' is missing.")
    list_fields = {
        key: _as_words(value, field=f"{name}.{key}")
        for key, value in raw.items()
        if key not in {"suspicious_tlds", "suspicious_keywords", "thresholds", "weights"}
    }
    return VariantPolicy(
        suspicious_tlds=frozenset(
            item.lstrip(".") for item in _as_words(raw.get("suspicious_tlds"), field=f"{name}.suspicious_tlds")
        ),
        suspicious_keywords=_as_words(raw.get("suspicious_keywords"), field=f"{name}.suspicious_keywords"),
        thresholds=_as_int_map(raw.get("thresholds"), field=f"{name}.thresholds"),
        weights=_as_int_map(raw.get("weights"), field=f"{name}.weights"),
        lists=MappingProxyType(list_fields),
    )


def parse_reference(payload: dict[str, Any]) -> ReferenceData:
    raw_brands = payload.get("brands")
    if not isinstance(raw_brands, dict) or not raw_brands:
        raise ConfigError("Reference data must define at least one brand.")
    brands = MappingProxyType(
        {
            str(domain).strip().lower(): frozenset(_as_words(typos, field=f"brands.{domain}"))
            for domain, typos in raw_brands.items()
        }
    )
    return ReferenceData(
        brands=brands,
        disposable_domains=frozenset(_as_words(payload.get("disposable_domains"), field="disposable_domains")),
        free_email_domains=frozenset(_as_words(payload.get("free_email_domains"), field="free_email_domains")),
        corporate_keywords=_as_words(payload.get("corporate_keywords"), field="corporate_keywords"),
        shortener_domains=_as_words(payload.get("shortener_domains"), field="shortener_domains"),
        email=_variant_policy(payload.get("email"), name="email"),
        url=_variant_policy(payload.get("url"), name="url"),
    )


@lru_cache(maxsize=4)
def _load_reference_cached(path: str) -> ReferenceData:
    p = Path(path)
    try:
        payload = yaml.safe_load(p.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigError(f"Cannot read reference data from {p}: {exc}") from exc
    if not isinstance(payload, dict):
        raise ConfigError(f"Reference data at {p} is not a mapping.")
    reference = parse_reference(payload)
    logger.debug("Loaded reference data from %s (%d brands)", p, len(reference.brands))
    return reference


def load_reference(path: str | Path | None = None) -> ReferenceData:
    """Load reference tables once per process; later calls share the same object."""

    return _load_reference_cached(str(Path(path) if path is not None else DEFAULT_REFERENCE_PATH))
