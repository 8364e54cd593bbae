"""Bounded redirect-chain resolution for URLs (HEAD probes, no body fetch)."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
import logging
import time
from typing import Protocol
from urllib.parse import urljoin, urlsplit

import httpx

from veritas_check.domain.models import RedirectChain, StopReason
from veritas_check.policy.reference import ReferenceData, load_reference

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "Mozilla/5.0 (compatible; Veritas-URLChecker/1.0)"


@dataclass
class RedirectPolicy:
    enabled: bool = True
    max_hops: int = 5
    total_budget_s: float = 5.0
    hop_timeout_s: float = 2.0
    user_agent: str = DEFAULT_USER_AGENT


@dataclass(frozen=True)
class ProbeResponse:
    status: int
    location: str | None = None

    @property
    def is_redirect(self) -> bool:
        return 300 <= self.status < 400 and bool(self.location)


class RedirectProbe(Protocol):
    async def head(self, url: str, timeout: float) -> ProbeResponse: ...


class HttpxRedirectProbe:
    """HEAD probe that never follows redirects itself."""

    def __init__(self, user_agent: str = DEFAULT_USER_AGENT, transport: httpx.AsyncBaseTransport | None = None):
        self.user_agent = user_agent
        self.transport = transport

    async def head(self, url: str, timeout: float) -> ProbeResponse:
        async with httpx.AsyncClient(
            follow_redirects=False,
            timeout=timeout,
            headers={"User-Agent": self.user_agent},
            transport=self.transport,
        ) as client:
            response = await client.head(url)
        return ProbeResponse(status=response.status_code, location=response.headers.get("location"))


def _is_http(url: str) -> bool:
    return urlsplit(url).scheme.lower() in {"http", "https"}


class RedirectResolver:
    def __init__(
        self,
        probe: RedirectProbe | None = None,
        policy: RedirectPolicy | None = None,
        reference: ReferenceData | None = None,
    ):
        self.policy = policy or RedirectPolicy()
        self.probe = probe or HttpxRedirectProbe(user_agent=self.policy.user_agent)
        self.reference = reference or load_reference()

    def is_shortened(self, url: str) -> bool:
        host = (urlsplit(url).hostname or "").lower()
        return bool(host) and self.reference.is_shortener_host(host)

    async def _walk(self, chain: list[str]) -> StopReason:
        current = chain[0]
        for _ in range(self.policy.max_hops):
            try:
                response = await asyncio.wait_for(
                    self.probe.head(current, self.policy.hop_timeout_s),
                    timeout=self.policy.hop_timeout_s,
                )
            except asyncio.TimeoutError:
                logger.debug("Redirect probe timed out for %s", current)
                return "hop_timeout"
            except Exception as exc:
                logger.debug("Redirect probe failed for %s: %s", current, exc)
                return "hop_error"

            if not response.is_redirect:
                return "completed"
            next_url = urljoin(current, str(response.location))
            if next_url in chain:
                chain.append(next_url)
                return "cycle"
            chain.append(next_url)
            if not _is_http(next_url):
                return "unsupported_scheme"
            current = next_url
        return "hop_budget"

    async def resolve(self, url: str) -> RedirectChain:
        """Follow redirects from ``url`` within the hop and time budgets; never raises."""

        started = time.monotonic()
        chain = [url]
        shortened = self.is_shortened(url)

        if not _is_http(url):
            stop_reason: StopReason = "unsupported_scheme"
        elif not self.policy.enabled:
            stop_reason = "completed"
        else:
            try:
                stop_reason = await asyncio.wait_for(self._walk(chain), timeout=self.policy.total_budget_s)
            except asyncio.TimeoutError:
                logger.warning("Redirect resolution exceeded %.1fs for %s", self.policy.total_budget_s, url)
                stop_reason = "time_budget"

        elapsed_ms = int((time.monotonic() - started) * 1000)
        logger.debug("Resolved %s in %d hop(s): %s", url, len(chain) - 1, stop_reason)
        return RedirectChain(
            urls=list(chain),
            is_shortened=shortened,
            truncated_by_budget=stop_reason in {"hop_budget", "time_budget"},
            cycle_detected=stop_reason == "cycle",
            stop_reason=stop_reason,
            elapsed_ms=elapsed_ms,
        )
