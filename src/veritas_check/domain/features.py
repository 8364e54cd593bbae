"""Lexical feature extraction for email addresses and URLs."""

from __future__ import annotations

from dataclasses import dataclass
import ipaddress
from urllib.parse import parse_qsl, urlsplit

import tldextract

# Bundled public-suffix snapshot only; scoring must never touch the network.
_EXTRACT = tldextract.TLDExtract(suffix_list_urls=())


@dataclass(frozen=True)
class HostParts:
    host: str
    labels: tuple[str, ...]
    base_domain: str
    base_name: str
    subdomain_labels: tuple[str, ...]
    tld: str
    is_ip: bool


@dataclass(frozen=True)
class EmailFeatures:
    raw: str
    local_part: str
    domain: str
    raw_domain: str
    base_domain: str
    base_name: str
    subdomain_labels: tuple[str, ...]
    labels: tuple[str, ...]
    tld: str
    is_ip: bool


@dataclass(frozen=True)
class UrlFeatures:
    raw: str
    scheme: str
    host: str
    base_domain: str
    base_name: str
    subdomain_labels: tuple[str, ...]
    labels: tuple[str, ...]
    tld: str
    path: str
    query_keys: tuple[str, ...]
    port: int | None
    is_ip: bool


def is_ip_literal(host: str) -> bool:
    try:
        ipaddress.ip_address(host.strip().strip("[]"))
    except ValueError:
        return False
    return True


def split_host(host: str) -> HostParts:
    """Split a lowercase host into registrable domain, subdomains and TLD."""

    clean = host.strip().strip(".").lower()
    labels = tuple(label for label in clean.split(".") if label)
    if is_ip_literal(clean):
        return HostParts(clean, labels, clean, clean, (), "", True)

    extracted = _EXTRACT(clean)
    if extracted.domain and extracted.suffix:
        base_domain = f"{extracted.domain}.{extracted.suffix}"
        base_name = extracted.domain
        subdomains = tuple(label for label in extracted.subdomain.split(".") if label)
    else:
        base_domain = ".".join(labels[-2:]) if len(labels) >= 2 else clean
        base_name = labels[-2] if len(labels) >= 2 else clean
        subdomains = labels[:-2]
    tld = labels[-1] if labels else ""
    return HostParts(clean, labels, base_domain, base_name, subdomains, tld, False)


def split_email(raw: str) -> tuple[str, str] | None:
    """Split on the last ``@``; ``None`` when either side is empty."""

    if "@" not in (raw or ""):
        return None
    local_part, domain = raw.strip().rsplit("@", 1)
    if not local_part or not domain:
        return None
    return local_part, domain


def extract_email_features(raw: str) -> EmailFeatures:
    parts = split_email(raw)
    if parts is None:
        raise ValueError(f"Not a structurally valid email address: {raw!r}")
    local_part, raw_domain = parts
    host = split_host(raw_domain)
    return EmailFeatures(
        raw=raw.strip(),
        local_part=local_part.lower(),
        domain=raw_domain.lower(),
        raw_domain=raw_domain,
        base_domain=host.base_domain,
        base_name=host.base_name,
        subdomain_labels=host.subdomain_labels,
        labels=host.labels,
        tld=host.tld,
        is_ip=host.is_ip,
    )


def extract_url_features(raw: str) -> UrlFeatures:
    clean = (raw or "").strip()
    parsed = urlsplit(clean)
    host_name = parsed.hostname or ""
    host = split_host(host_name) if host_name else HostParts("", (), "", "", (), "", False)
    try:
        port = parsed.port
    except ValueError:
        port = None
    query_keys = tuple(key for key, _ in parse_qsl(parsed.query, keep_blank_values=True))
    return UrlFeatures(
        raw=clean,
        scheme=parsed.scheme.lower(),
        host=host.host,
        base_domain=host.base_domain,
        base_name=host.base_name,
        subdomain_labels=host.subdomain_labels,
        labels=host.labels,
        tld=host.tld,
        path=parsed.path,
        query_keys=query_keys,
        port=port,
        is_ip=host.is_ip,
    )
