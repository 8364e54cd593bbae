"""Reference data and scoring policy tables."""

from veritas_check.policy.reference import (
    DEFAULT_REFERENCE_PATH,
    KEYBOARD_NEIGHBORS,
    ReferenceData,
    VariantPolicy,
    load_reference,
    parse_reference,
)

__all__ = [
    "DEFAULT_REFERENCE_PATH",
    "KEYBOARD_NEIGHBORS",
    "ReferenceData",
    "VariantPolicy",
    "load_reference",
    "parse_reference",
]
