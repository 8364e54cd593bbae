"""Command-line runner: evaluate one email address or URL and print JSON."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging

from veritas_check.domain.models import Identifier
from veritas_check.orchestrator.build import create_pipeline

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def configure_logging(level: str) -> None:
    logging.basicConfig(level=getattr(logging, level.upper(), logging.WARNING), format=LOG_FORMAT)


def run_once(*, email: str | None = None, url: str | None = None, profile: str | None = None) -> str:
    pipeline, cfg = create_pipeline(profile_override=profile)
    configure_logging(cfg.log_level)
    if email is not None:
        identifier = Identifier(raw=email, variant="email")
    elif url is not None:
        identifier = Identifier(raw=url, variant="url")
    else:
        raise ValueError("Either email or url is required.")
    result = asyncio.run(pipeline.evaluate(identifier))
    payload = result.model_dump(mode="json")
    payload["runtime"] = {"profile": cfg.profile, "provider": cfg.provider, "model": cfg.model}
    return json.dumps(payload, ensure_ascii=True, indent=2)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="veritas-check")
    target = parser.add_mutually_exclusive_group(required=True)
    target.add_argument("--email", help="Sender email address to evaluate.")
    target.add_argument("--url", help="URL to evaluate (redirects are followed).")
    parser.add_argument("--profile", help="Config profile to use, e.g. gemini, openai or ollama.")
    return parser


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    print(run_once(email=args.email, url=args.url, profile=args.profile))
