"""
Runtime settings. Defaults come from params/canonical_defaults.py; each field can be
overridden through a ROBOSPEAK_* environment variable.
"""
import logging
import os
from dataclasses import dataclass, fields, replace
from typing import Dict, Optional, Tuple

from robospeak.core.types import AudioFormat
from robospeak.params import canonical_defaults as defaults

logger = logging.getLogger(__name__)

DEV = os.environ.get("ENV", "development").lower() in ("development", "dev", "test")

ENV_PREFIX = "ROBOSPEAK_"


@dataclass(frozen=True)
class Settings:
    min_words: int = defaults.MIN_WORDS
    max_words: int = defaults.MAX_WORDS
    pool_cap: int = defaults.IDENTITY_POOL_CAP
    wait_min_ms: float = defaults.WAIT_MIN_MS
    wait_max_ms: float = defaults.WAIT_MAX_MS
    fade_ms: float = defaults.FADE_MS
    sample_rate: int = defaults.SAMPLE_RATE
    bit_depth: int = defaults.BIT_DEPTH
    grammar: str = defaults.GRAMMAR

    @property
    def length_range(self) -> Tuple[int, int]:
        return (self.min_words, self.max_words)

    @property
    def wait_band(self) -> Tuple[float, float]:
        return (self.wait_min_ms, self.wait_max_ms)

    @property
    def audio_format(self) -> AudioFormat:
        return AudioFormat(sample_rate=self.sample_rate, bit_depth=self.bit_depth)

    def validate(self) -> "Settings":
        if not 1 <= self.min_words <= self.max_words:
            raise ValueError(
                f"word range must satisfy 1 <= min <= max, got ({self.min_words}, {self.max_words})"
            )
        if self.pool_cap < 1:
            raise ValueError(f"pool_cap must be >= 1, got {self.pool_cap}")
        if not 0 <= self.wait_min_ms <= self.wait_max_ms:
            raise ValueError(
                f"wait band must satisfy 0 <= min <= max, got ({self.wait_min_ms}, {self.wait_max_ms})"
            )
        if self.fade_ms < 0:
            raise ValueError(f"fade_ms must be >= 0, got {self.fade_ms}")
        if self.grammar not in defaults.GRAMMARS:
            raise ValueError(f"grammar must be one of {defaults.GRAMMARS}, got {self.grammar!r}")
        # Raises on bad sample_rate / bit_depth
        self.audio_format
        return self

    @classmethod
    def from_env(cls, environ: Optional[Dict[str, str]] = None) -> "Settings":
        """Build settings from ROBOSPEAK_* variables, e.g. ROBOSPEAK_MAX_WORDS=15."""
        environ = os.environ if environ is None else environ
        overrides = {}
        for f in fields(cls):
            raw = environ.get(ENV_PREFIX + f.name.upper())
            if raw is None:
                continue
            try:
                overrides[f.name] = f.type(raw) if f.type in (int, float) else raw
            except ValueError as exc:
                raise ValueError(f"invalid value for {ENV_PREFIX}{f.name.upper()}: {raw!r}") from exc
        if overrides and DEV:
            logger.info("[Settings] Environment overrides: %s", overrides)
        return replace(cls(), **overrides).validate()
