"""Heuristic rule set for sender email addresses.

Rules are independent and pure: each reads the extracted features plus the
reference tables and returns zero or more weighted indicators. Table order is
evaluation order, which is also the order indicators are shown to the user.
"""

from __future__ import annotations

import re

from veritas_check.domain.features import EmailFeatures
from veritas_check.domain.models import Indicator
from veritas_check.scoring.rules import (
    RuleContext,
    decode_idna,
    fuzzy_brand_hit,
    has_non_latin_script,
    keyboard_neighbor_hit,
    lookalike_hits,
    rule_table,
    substitution_hits,
)

Ctx = RuleContext[EmailFeatures]

_COMBO_PATTERNS = (
    (re.compile(r"(amazon|paypal|apple|microsoft|google|netflix|facebook)[-.]"), "major tech/retail brand"),
    (re.compile(r"(chase|bank|citibank|wells|fargo)[-.]"), "financial institution"),
    (re.compile(r"(service|support|account|verify|security)[-.](amazon|paypal|apple|google)"), "service subdomain + brand"),
)
_DIGIT_LOOKALIKES = (
    (re.compile(r"0(?=.*[a-zA-Z])"), "zero/O substitution"),
    (re.compile(r"1(?=.*[a-zA-Z])"), "one/l substitution"),
    (re.compile(r"[5S]{2,}"), "S/5 pattern repetition"),
    (re.compile(r"I.*[a-z]|[a-z].*I"), "capital I posing as lowercase l"),
)
_BEC_PATTERNS = (
    (re.compile(r"ceo|executive|cfo|cto|director", re.IGNORECASE), "bec_executive", "executive role in address"),
    (re.compile(r"finance|accounting|payroll|treasury", re.IGNORECASE), "bec_finance", "finance department keywords"),
    (re.compile(r"wire|transfer|payment|invoice", re.IGNORECASE), "bec_transaction", "money movement keywords"),
)
_SERVICE_ID = re.compile(r"support-?id-?\d+|ticket-?\d+|case-?\d+|ref-?\d+|transaction-?\d+", re.IGNORECASE)
_PROFESSIONAL_HINTS = ("company", "corp")


def _rule_disposable_domain(ctx: Ctx) -> list[Indicator]:
    if ctx.features.domain in ctx.reference.disposable_domains:
        return [ctx.hit("disposable_domain", "Disposable/temporary email domain detected")]
    return []


def _rule_free_provider_impersonation(ctx: Ctx) -> list[Indicator]:
    f = ctx.features
    if f.domain not in ctx.reference.free_email_domains:
        return []
    if any(keyword in f.local_part for keyword in ctx.reference.corporate_keywords):
        return [
            ctx.hit(
                "free_provider_impersonation",
                "Corporate impersonation attempt detected (free email domain + business keywords)",
            )
        ]
    return []


def _rule_lookalike_domain(ctx: Ctx) -> list[Indicator]:
    f = ctx.features
    return [
        ctx.hit("lookalike_domain", f'Typosquatting confirmed: "{f.domain}" mimics "{legitimate}"')
        for legitimate in lookalike_hits((f.domain, f.base_domain), ctx.reference)
    ]


def _rule_fuzzy_brand_match(ctx: Ctx) -> list[Indicator]:
    f = ctx.features
    hit = fuzzy_brand_hit(f.base_name, f.base_domain, ctx.reference)
    if hit is None:
        return []
    brand, distance = hit
    return [
        ctx.hit(
            "fuzzy_brand_match",
            f'Typosquatting (fuzzy match): "{f.base_name}" resembles "{brand}" ({distance} character difference)',
        )
    ]


def _rule_combo_domain(ctx: Ctx) -> list[Indicator]:
    if ctx.reference.is_trusted_domain(ctx.features.base_domain):
        return []
    return [
        ctx.hit("combo_domain", f"Combo domain attack: uses {label} name in suspicious context")
        for pattern, label in _COMBO_PATTERNS
        if pattern.search(ctx.features.domain)
    ]


def _rule_keyboard_proximity(ctx: Ctx) -> list[Indicator]:
    f = ctx.features
    hit = keyboard_neighbor_hit(f.base_name, f.base_domain, ctx.reference)
    if hit is None:
        return []
    brand, expected, actual = hit
    return [
        ctx.hit(
            "keyboard_proximity",
            f'Keyboard proximity typo: "{f.base_name}" is one key away from "{brand}" ("{actual}" for "{expected}")',
        )
    ]


def _rule_character_substitution(ctx: Ctx) -> list[Indicator]:
    return [
        ctx.hit("character_substitution", f'Number/letter substitution: uses {label} confusion (e.g. "{example}")')
        for label, example in substitution_hits(ctx.features.base_domain)
    ]


def _rule_homoglyph_script(ctx: Ctx) -> list[Indicator]:
    if has_non_latin_script(ctx.features.raw):
        return [
            ctx.hit(
                "homoglyph_script",
                "Homoglyph attack detected: non-Latin characters (Cyrillic/Greek/etc.) in the address",
            )
        ]
    return []


def _rule_digit_letter_lookalike(ctx: Ctx) -> list[Indicator]:
    # Case matters for the S/5 and capital I patterns, so match the domain as typed.
    return [
        ctx.hit("digit_letter_lookalike", f"Homoglyph attack in domain: {label}")
        for pattern, label in _DIGIT_LOOKALIKES
        if pattern.search(ctx.features.raw_domain)
    ]


def _rule_suspicious_keywords(ctx: Ctx) -> list[Indicator]:
    matched = [keyword for keyword in ctx.policy.suspicious_keywords if keyword in ctx.features.local_part]
    if not matched:
        return []
    weight = min(len(matched) * ctx.policy.weight("suspicious_keyword"), ctx.policy.weight("suspicious_keyword_cap"))
    return [ctx.hit("suspicious_keywords", f"Suspicious keywords detected: {', '.join(matched)}", weight)]


def _rule_business_email_compromise(ctx: Ctx) -> list[Indicator]:
    return [
        ctx.hit(
            "business_email_compromise",
            f"Business Email Compromise (BEC) pattern: {label}",
            ctx.policy.weight(weight_key),
        )
        for pattern, weight_key, label in _BEC_PATTERNS
        if pattern.search(ctx.features.raw)
    ]


def _rule_long_digit_run(ctx: Ctx) -> list[Indicator]:
    match = re.search(r"\d{5,}", ctx.features.raw)
    if match:
        return [ctx.hit("long_digit_run", f'Excessive random numbers: "{match.group(0)}"')]
    return []


def _rule_repeating_characters(ctx: Ctx) -> list[Indicator]:
    match = re.search(r"(.)\1{4,}", ctx.features.raw)
    if match:
        return [ctx.hit("repeating_characters", f'Repeating characters detected: "{match.group(0)}"')]
    return []


def _rule_suspicious_tld(ctx: Ctx) -> list[Indicator]:
    tld = ctx.features.tld
    if tld and tld in ctx.policy.suspicious_tlds:
        return [ctx.hit("suspicious_tld", f"High-risk TLD: .{tld} (frequently used for phishing/spam)")]
    return []


def _rule_shortener_domain(ctx: Ctx) -> list[Indicator]:
    base = ctx.features.base_domain
    if base in ctx.reference.shortener_domains:
        return [ctx.hit("shortener_domain", f"URL shortener domain: {base} (can hide malicious destinations)")]
    return []


def _rule_excessive_subdomains(ctx: Ctx) -> list[Indicator]:
    if len(ctx.features.labels) > 3 and not ctx.features.is_ip:
        return [
            ctx.hit(
                "excessive_subdomains",
                "Overly complex domain structure (excessive subdomains, possible subdomain confusion attack)",
            )
        ]
    return []


def _rule_subdomain_confusion(ctx: Ctx) -> list[Indicator]:
    if re.search(r"\.(com|net|org)-", ctx.features.domain):
        return [
            ctx.hit(
                "subdomain_confusion",
                'Subdomain confusion: domain contains a ".com-" pattern (the real domain is after the hyphen)',
            )
        ]
    return []


def _rule_action_word_domain(ctx: Ctx) -> list[Indicator]:
    domain = ctx.features.domain
    for word in ctx.policy.words("action_words"):
        if f"-{word}" in domain or f"{word}-" in domain:
            return [ctx.hit("action_word_domain", f'Suspicious domain wording: contains "{word}" next to a hyphen')]
    return []


def _rule_brand_in_subdomain(ctx: Ctx) -> list[Indicator]:
    subdomain = ".".join(ctx.features.subdomain_labels)
    if subdomain and any(brand in subdomain for _, brand in ctx.reference.brand_names):
        return [
            ctx.hit("brand_in_subdomain", "Brand impersonation in subdomain: trusted brand appears before the real domain")
        ]
    return []


def _rule_hyphenated_brand(ctx: Ctx) -> list[Indicator]:
    if any(pattern in ctx.features.domain for pattern in ctx.policy.words("hyphenated_brands")):
        return [ctx.hit("hyphenated_brand", "Domain uses hyphens to break up brand names (spoofing technique)")]
    return []


def _rule_short_local_part(ctx: Ctx) -> list[Indicator]:
    if len(ctx.features.local_part) < 2:
        return [ctx.hit("short_local_part", "Extremely short username (typically invalid)")]
    return []


def _rule_long_local_part(ctx: Ctx) -> list[Indicator]:
    if len(ctx.features.local_part) > 64:
        return [ctx.hit("long_local_part", "Unusually long username")]
    return []


def _rule_generic_local_part(ctx: Ctx) -> list[Indicator]:
    f = ctx.features
    if f.local_part in ctx.policy.words("generic_local_parts") and f.domain not in ctx.reference.free_email_domains:
        return [ctx.hit("generic_local_part", f'Generic username "{f.local_part}" on unknown domain')]
    return []


def _rule_professional_domain_mismatch(ctx: Ctx) -> list[Indicator]:
    f = ctx.features
    professional = any(hint in f.domain for hint in _PROFESSIONAL_HINTS) or f.domain.endswith(".edu")
    if professional and any(keyword in f.local_part for keyword in ctx.policy.suspicious_keywords):
        return [
            ctx.hit(
                "professional_domain_mismatch",
                "Mismatch: professional domain paired with suspicious username",
            )
        ]
    return []


def _rule_alias_pattern(ctx: Ctx) -> list[Indicator]:
    if "++" in ctx.features.local_part:
        return [ctx.hit("alias_pattern", "Email aliasing pattern detected (++ technique)")]
    return []


def _rule_consecutive_special_chars(ctx: Ctx) -> list[Indicator]:
    if re.search(r"[.\-_]{2,}", ctx.features.local_part):
        return [ctx.hit("consecutive_special_chars", "Multiple consecutive special characters in username")]
    return []


def _rule_punycode_domain(ctx: Ctx) -> list[Indicator]:
    domain = ctx.features.domain
    if "xn--" in domain:
        return [
            ctx.hit(
                "punycode_domain",
                f'Punycode detected: "{domain}" decodes to "{decode_idna(domain)}" (possible homoglyph attack)',
            )
        ]
    return []


def _rule_ip_domain(ctx: Ctx) -> list[Indicator]:
    if ctx.features.is_ip:
        return [ctx.hit("ip_domain", "IP address as domain: using a raw IP instead of a domain name (major red flag)")]
    return []


def _rule_service_id_pattern(ctx: Ctx) -> list[Indicator]:
    if _SERVICE_ID.search(ctx.features.local_part):
        return [
            ctx.hit("service_id_pattern", "Generic service ID pattern: username looks like an auto-generated support ticket")
        ]
    return []


def _rule_parked_domain(ctx: Ctx) -> list[Indicator]:
    return [
        ctx.hit("parked_domain", f'Expired/parked domain indicator: domain contains "{word}"')
        for word in ctx.policy.words("parked_words")
        if word in ctx.features.domain
    ]


def _rule_excessive_hyphens(ctx: Ctx) -> list[Indicator]:
    count = ctx.features.domain.count("-")
    if count >= 3:
        return [ctx.hit("excessive_hyphens", f"Excessive hyphens in domain: {count} hyphens detected (obfuscation tactic)")]
    return []


def _rule_mixed_case_domain(ctx: Ctx) -> list[Indicator]:
    if re.search(r"[A-Z]", ctx.features.raw_domain):
        return [ctx.hit("mixed_case_domain", "Mixed case in domain: legitimate domains are written in lowercase")]
    return []


def _rule_vowelless_name(ctx: Ctx) -> list[Indicator]:
    name = ctx.features.base_name
    if len(name) > 5 and not ctx.features.is_ip and not re.search(r"[aeiou]", name):
        return [ctx.hit("vowelless_name", f'Vowel-less domain: "{name}" appears to be gibberish')]
    return []


EMAIL_RULES = rule_table(
    _rule_disposable_domain,
    _rule_free_provider_impersonation,
    _rule_lookalike_domain,
    _rule_fuzzy_brand_match,
    _rule_combo_domain,
    _rule_keyboard_proximity,
    _rule_character_substitution,
    _rule_homoglyph_script,
    _rule_digit_letter_lookalike,
    _rule_suspicious_keywords,
    _rule_business_email_compromise,
    _rule_long_digit_run,
    _rule_repeating_characters,
    _rule_suspicious_tld,
    _rule_shortener_domain,
    _rule_excessive_subdomains,
    _rule_subdomain_confusion,
    _rule_action_word_domain,
    _rule_brand_in_subdomain,
    _rule_hyphenated_brand,
    _rule_short_local_part,
    _rule_long_local_part,
    _rule_generic_local_part,
    _rule_professional_domain_mismatch,
    _rule_alias_pattern,
    _rule_consecutive_special_chars,
    _rule_punycode_domain,
    _rule_ip_domain,
    _rule_service_id_pattern,
    _rule_parked_domain,
    _rule_excessive_hyphens,
    _rule_mixed_case_domain,
    _rule_vowelless_name,
)
