"""Centralised settings for the article parser service.

All runtime configuration is resolved here in one place.  Values can be
overridden via environment variables or a `.env` file in the project root
(loaded automatically when this module is imported).  They are read once at
process start, never per request.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import FrozenSet

from dotenv import load_dotenv

# Load .env from the project root (one level up from this package)
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path, override=False)

_DEFAULT_AMP_DOMAINS = (
    "www.runnersworld.com,"
    "www.menshealth.com,"
    "www.womenshealthmag.com,"
    "www.goodhousekeeping.com,"
    "www.prevention.com"
)


def _flag_on(name: str) -> bool:
    """Opt-in flag: enabled only when set to ``1``."""
    return os.environ.get(name, "0") == "1"


def _flag_not_off(name: str) -> bool:
    """Opt-out flag: enabled unless set to ``0``."""
    return os.environ.get(name, "1") != "0"


def _domain_set(raw: str) -> FrozenSet[str]:
    return frozenset(d.strip().lower() for d in raw.split(",") if d.strip())


@dataclass
class Settings:
    # ------------------------------------------------------------------
    # Strategy selection
    # ------------------------------------------------------------------
    safe_mode: bool = field(default_factory=lambda: _flag_on("PARSER_SAFE_MODE"))
    enable_amp: bool = field(default_factory=lambda: _flag_not_off("PARSER_ENABLE_AMP"))
    enable_readability: bool = field(
        default_factory=lambda: _flag_not_off("PARSER_ENABLE_READABILITY")
    )
    enable_render: bool = field(default_factory=lambda: _flag_on("PARSER_ENABLE_RENDER"))
    wordcount_min: int = field(
        default_factory=lambda: int(os.environ.get("PARSER_WORDCOUNT_MIN", "800"))
    )
    amp_domains: FrozenSet[str] = field(
        default_factory=lambda: _domain_set(
            os.environ.get("PARSER_AMP_DOMAINS", _DEFAULT_AMP_DOMAINS)
        )
    )

    # ------------------------------------------------------------------
    # Recovery passes
    # ------------------------------------------------------------------
    recover_intro: bool = field(
        default_factory=lambda: _flag_not_off("PARSER_RECOVER_INTRO")
    )
    recover_card_headers: bool = field(
        default_factory=lambda: _flag_not_off("PARSER_RECOVER_CARD_HEADERS")
    )
    card_marker: str = field(
        default_factory=lambda: os.environ.get("PARSER_CARD_MARKER", r"our full .{0,60}?reviews")
    )
    card_category: str = field(
        default_factory=lambda: os.environ.get("PARSER_CARD_CATEGORY", "glove")
    )

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------
    fetch_retries: int = field(
        default_factory=lambda: int(os.environ.get("FETCH_RETRIES", "7"))
    )
    fetch_retry_delay: float = field(
        default_factory=lambda: float(os.environ.get("FETCH_RETRY_DELAY", "20.0"))
    )
    # Optional fallback fetches (the AMP variant) give up much sooner.
    fallback_fetch_retries: int = field(
        default_factory=lambda: int(os.environ.get("FALLBACK_FETCH_RETRIES", "2"))
    )
    fallback_fetch_retry_delay: float = field(
        default_factory=lambda: float(os.environ.get("FALLBACK_FETCH_RETRY_DELAY", "2.0"))
    )
    request_timeout: float = field(
        default_factory=lambda: float(os.environ.get("REQUEST_TIMEOUT", "60.0"))
    )
    render_timeout: float = field(
        default_factory=lambda: float(os.environ.get("RENDER_TIMEOUT", "45.0"))
    )

    # ------------------------------------------------------------------
    # Logging
    # ------------------------------------------------------------------
    log_dir: Path = field(
        default_factory=lambda: Path(os.environ.get("PARSER_LOG_DIR", "."))
    )

    @property
    def parser_log_path(self) -> Path:
        """Append-only log of every pipeline step."""
        return self.log_dir / "parser.log"

    @property
    def error_log_path(self) -> Path:
        """Append-only log of errors only."""
        return self.log_dir / "error.log"


# Module-level singleton; import this everywhere:
#   from article_parser.config import settings
settings = Settings()
