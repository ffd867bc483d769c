from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from forgepy.exec import MAX_LOOP_ITERATIONS
from forgepy.parser import ParseMode

DEFAULT_DELTA: Final[float] = 1 / 60


@dataclass(frozen=True, slots=True)
class VMOptions:
    """Runtime knobs for one `ForgeVM`."""

    default_delta: float = DEFAULT_DELTA
    parse_mode: ParseMode = ParseMode.PERMISSIVE
    max_loop_iterations: int = MAX_LOOP_ITERATIONS
