"""Session configuration (pure data, no business logic)."""

from __future__ import annotations

import argparse
from dataclasses import dataclass

from . import constants


@dataclass(frozen=True)
class TracerConfig:
    """Groups analyzer and playback configuration."""

    provider: str = constants.PROVIDER_OPENAI
    model: str = ""
    base_url: str = ""
    max_tokens: int = constants.DEFAULT_MAX_TOKENS
    tick_interval: float = constants.DEFAULT_TICK_INTERVAL
    annotate_pointers: bool = True

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> TracerConfig:
        return cls(
            provider=args.provider,
            model=args.model or "",
            base_url=args.base_url or "",
            max_tokens=args.max_tokens,
            tick_interval=args.interval,
            annotate_pointers=not args.no_pointers,
        )
