"""Heuristic rule set for URLs."""

from __future__ import annotations

import re

from veritas_check.domain.features import UrlFeatures
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

Ctx = RuleContext[UrlFeatures]

_RANDOM_RUN = re.compile(r"[a-zA-Z0-9]{30,}")


def _is_official_host(host: str, legitimate: str) -> bool:
    return host == legitimate or host.endswith(f".{legitimate}")


def _rule_insecure_scheme(ctx: Ctx) -> list[Indicator]:
    if ctx.features.scheme != "https":
        return [ctx.hit("insecure_scheme", "Insecure connection: not using HTTPS encryption")]
    return []


def _rule_ip_host(ctx: Ctx) -> list[Indicator]:
    if ctx.features.is_ip:
        return [ctx.hit("ip_host", "Uses an IP address instead of a domain name (common in phishing)")]
    return []


def _rule_shortener_host(ctx: Ctx) -> list[Indicator]:
    host = ctx.features.host
    if host and ctx.reference.is_shortener_host(host):
        return [ctx.hit("shortener_host", f"URL shortener detected: {host} (hides the real destination)")]
    return []


def _rule_suspicious_tld(ctx: Ctx) -> list[Indicator]:
    tld = ctx.features.tld
    if tld and not ctx.features.is_ip and tld in ctx.policy.suspicious_tlds:
        return [ctx.hit("suspicious_tld", f"High-risk TLD: .{tld} (frequently used for malicious sites)")]
    return []


def _rule_brand_embedded(ctx: Ctx) -> list[Indicator]:
    host = ctx.features.host
    if not host:
        return []
    indicators: list[Indicator] = []
    for legitimate in ctx.policy.words("impersonated_brands"):
        brand = legitimate.split(".")[0]
        if brand in host and not _is_official_host(host, legitimate):
            indicators.append(
                ctx.hit("brand_embedded", f'Brand impersonation: "{brand}" appears in a domain not owned by {legitimate}')
            )
    return indicators


def _rule_lookalike_domain(ctx: Ctx) -> list[Indicator]:
    f = ctx.features
    return [
        ctx.hit("lookalike_domain", f'Typosquatting: "{f.base_domain}" mimics "{legitimate}"')
        for legitimate in lookalike_hits((f.base_domain,), ctx.reference)
    ]


def _rule_fuzzy_brand_match(ctx: Ctx) -> list[Indicator]:
    f = ctx.features
    if f.is_ip:
        return []
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


def _rule_keyboard_proximity(ctx: Ctx) -> list[Indicator]:
    f = ctx.features
    if f.is_ip:
        return []
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
    if ctx.features.is_ip:
        return []
    return [
        ctx.hit("character_substitution", f'Number/letter substitution: uses {label} confusion (e.g. "{example}")')
        for label, example in substitution_hits(ctx.features.base_domain)
    ]


def _rule_subdomain_confusion(ctx: Ctx) -> list[Indicator]:
    if re.search(r"\.(com|net|org)-", ctx.features.host):
        return [
            ctx.hit(
                "subdomain_confusion",
                'Subdomain confusion: host contains a ".com-" pattern (the real domain is after the hyphen)',
            )
        ]
    return []


def _rule_excessive_hyphens(ctx: Ctx) -> list[Indicator]:
    count = ctx.features.host.count("-")
    if count >= 3:
        return [ctx.hit("excessive_hyphens", f"Excessive hyphens in domain: {count} hyphens detected")]
    return []


def _rule_complex_subdomain(ctx: Ctx) -> list[Indicator]:
    if len(ctx.features.subdomain_labels) >= 3:
        return [ctx.hit("complex_subdomain", "Complex subdomain structure (possible obfuscation)")]
    return []


def _rule_phishing_keywords(ctx: Ctx) -> list[Indicator]:
    text = ctx.features.raw.lower()
    matched = [keyword for keyword in ctx.policy.suspicious_keywords if keyword in text]
    if len(matched) >= 2:
        return [ctx.hit("phishing_keywords", f"Multiple phishing keywords: {', '.join(matched)}")]
    return []


def _rule_long_path(ctx: Ctx) -> list[Indicator]:
    if len(ctx.features.path) > 100:
        return [ctx.hit("long_path", "Unusually long URL path (may hide the real destination)")]
    return []


def _rule_random_path(ctx: Ctx) -> list[Indicator]:
    if _RANDOM_RUN.search(ctx.features.path):
        return [ctx.hit("random_path", "Random-looking character string in path (auto-generated phishing link)")]
    return []


def _rule_redirect_parameters(ctx: Ctx) -> list[Indicator]:
    names = set(ctx.policy.words("redirect_parameters"))
    found = [key for key in ctx.features.query_keys if key.lower() in names]
    if found:
        return [ctx.hit("redirect_parameters", f"Contains redirect parameters: {', '.join(dict.fromkeys(found))}")]
    return []


def _rule_punycode_host(ctx: Ctx) -> list[Indicator]:
    host = ctx.features.host
    if "xn--" in host:
        return [
            ctx.hit(
                "punycode_host",
                f'Punycode detected: "{host}" decodes to "{decode_idna(host)}" (possible homoglyph attack)',
            )
        ]
    return []


def _rule_homoglyph_script(ctx: Ctx) -> list[Indicator]:
    if has_non_latin_script(ctx.features.raw):
        return [ctx.hit("homoglyph_script", "Homoglyph attack: non-Latin characters that mimic Latin letters")]
    return []


def _rule_at_symbol(ctx: Ctx) -> list[Indicator]:
    if "@" in ctx.features.raw:
        return [ctx.hit("at_symbol", "Contains @ symbol (browser ignores everything before it)")]
    return []


def _rule_unusual_port(ctx: Ctx) -> list[Indicator]:
    port = ctx.features.port
    if port is not None and str(port) not in ctx.policy.words("standard_ports"):
        return [ctx.hit("unusual_port", f"Non-standard port: {port}")]
    return []


def _rule_executable_download(ctx: Ctx) -> list[Indicator]:
    path = ctx.features.path.lower()
    for extension in ctx.policy.words("executable_extensions"):
        if path.endswith(extension):
            return [ctx.hit("executable_download", f"Direct executable download: {extension} file")]
    return []


def _rule_data_scheme(ctx: Ctx) -> list[Indicator]:
    if ctx.features.scheme == "data":
        return [ctx.hit("data_scheme", "Data URI scheme (can embed malicious content)")]
    return []


def _rule_javascript_scheme(ctx: Ctx) -> list[Indicator]:
    if ctx.features.scheme == "javascript":
        return [ctx.hit("javascript_scheme", "JavaScript URI scheme (executes code when opened)")]
    return []


URL_RULES = rule_table(
    _rule_insecure_scheme,
    _rule_ip_host,
    _rule_shortener_host,
    _rule_suspicious_tld,
    _rule_brand_embedded,
    _rule_lookalike_domain,
    _rule_fuzzy_brand_match,
    _rule_keyboard_proximity,
    _rule_character_substitution,
    _rule_subdomain_confusion,
    _rule_excessive_hyphens,
    _rule_complex_subdomain,
    _rule_phishing_keywords,
    _rule_long_path,
    _rule_random_path,
    _rule_redirect_parameters,
    _rule_punycode_host,
    _rule_homoglyph_script,
    _rule_at_symbol,
    _rule_unusual_port,
    _rule_executable_download,
    _rule_data_scheme,
    _rule_javascript_scheme,
)
