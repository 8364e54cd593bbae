"""CLI entrypoint for veritas_check."""

from __future__ import annotations

from veritas_check.cli import main

if __name__ == "__main__":
    main()
