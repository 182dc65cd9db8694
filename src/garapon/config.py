"""Runtime settings.

Defaults mirror the arcade feel of the drum: 108 shuffle frames of 30 ms
before a pick goes through on its own, and a 30-frame "nowsleeping" pause
before the winning numbers are shown.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Optional

PATIENCE = 108          # max shuffle frames per pick
FRAME_DELAY = 0.03      # seconds per shuffle frame
NAP_FRAMES = 30         # frames of the closing "zzz..." animation
NAP_DELAY = 0.15        # seconds per closing frame


def _env_int(name: str, default: Optional[int]) -> Optional[int]:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        return default


@dataclass(frozen=True)
class Settings:
    """Everything a playthrough needs to know besides the variant."""

    patience: int = PATIENCE
    frame_delay: float = FRAME_DELAY
    nap_frames: int = NAP_FRAMES
    nap_delay: float = NAP_DELAY
    seed: Optional[int] = None
    extra_balls: int = 0
    log_level: str = "WARNING"
    log_file: Optional[str] = None

    @classmethod
    def from_env(cls) -> "Settings":
        """Read GARAPON_* variables, falling back to defaults on bad values."""
        frame_ms = _env_int("GARAPON_FRAME_MS", None)
        nap_ms = _env_int("GARAPON_NAP_MS", None)
        return cls(
            patience=_env_int("GARAPON_PATIENCE", PATIENCE),
            frame_delay=FRAME_DELAY if frame_ms is None else frame_ms / 1000,
            nap_frames=_env_int("GARAPON_NAP_FRAMES", NAP_FRAMES),
            nap_delay=NAP_DELAY if nap_ms is None else nap_ms / 1000,
            seed=_env_int("GARAPON_SEED", None),
            extra_balls=_env_int("GARAPON_EXTRA_BALLS", 0),
            log_level=os.getenv("GARAPON_LOG_LEVEL", "WARNING").upper().strip(),
            log_file=os.getenv("GARAPON_LOG_FILE") or None,
        )

    def override(self, **changes) -> "Settings":
        """Return a copy with every non-None keyword applied."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})
