"""Decoder configuration and opt-in hot path profiling."""

from __future__ import annotations

import os
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

# Hook type definitions - hooks can return custom types
ParseIntHook = Callable[[str], Any] | None
ParseFloatHook = Callable[[str], Any] | None

DEFAULT_CHUNK_SIZE = 64 * 1024

# Profiling infrastructure - zero-cost when disabled
PROFILE_HOT_PATHS = __debug__ and "FSMJSON_PROFILE" in os.environ


@dataclass(frozen=True)
class DecodeConfig:
    """
    Configures decoding behavior with immutable settings.

    ``parse_int`` and ``parse_float`` receive the literal text of a number
    and replace the default ``int``/``float`` constructors. ``chunk_size``
    bounds each ``read`` call made on file-like sources.
    """

    parse_int: ParseIntHook = None
    parse_float: ParseFloatHook = None
    chunk_size: int = DEFAULT_CHUNK_SIZE

    def __post_init__(self) -> None:
        if self.parse_int is not None and not callable(self.parse_int):
            raise TypeError("parse_int must be callable")
        if self.parse_float is not None and not callable(self.parse_float):
            raise TypeError("parse_float must be callable")
        if (
            not isinstance(self.chunk_size, int)
            or isinstance(self.chunk_size, bool)
            or self.chunk_size <= 0
        ):
            raise ValueError("chunk_size must be a positive integer")


def resolve_config(
    config: DecodeConfig | None, overrides: dict[str, Any]
) -> DecodeConfig:
    """Builds the effective config from an explicit one or keyword options."""
    if config is None:
        return DecodeConfig(**overrides)
    if overrides:
        raise TypeError(
            "pass either config= or keyword options, not both: "
            + ", ".join(sorted(overrides))
        )
    if not isinstance(config, DecodeConfig):
        raise TypeError(
            f"config must be a DecodeConfig, not {type(config).__name__}"
        )
    return config


@dataclass
class HotPathStats:
    """Statistics for profiling hot paths during decoding."""

    function_name: str
    call_count: int = 0
    total_time_ns: int = 0
    bytes_processed: int = 0

    def record_call(self, duration_ns: int, nbytes: int = 0) -> None:
        """Records a call with its timing and the bytes it consumed."""
        self.call_count += 1
        self.total_time_ns += duration_ns
        self.bytes_processed += nbytes


if PROFILE_HOT_PATHS:
    _hot_path_stats: dict[str, HotPathStats] = {}

    class ProfileContext:
        """Context manager for profiling hot paths."""

        def __init__(self, func_name: str) -> None:
            self.func_name = func_name
            self.nbytes = 0
            self.start_time = 0

        def add_bytes(self, count: int) -> None:
            self.nbytes += count

        def __enter__(self) -> ProfileContext:
            self.start_time = time.perf_counter_ns()
            return self

        def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
            duration = time.perf_counter_ns() - self.start_time
            if self.func_name not in _hot_path_stats:
                _hot_path_stats[self.func_name] = HotPathStats(self.func_name)
            _hot_path_stats[self.func_name].record_call(duration, self.nbytes)

    def get_hot_path_stats() -> dict[str, HotPathStats]:
        """Returns current profiling statistics."""
        return _hot_path_stats.copy()

    def clear_hot_path_stats() -> None:
        """Clears profiling statistics."""
        _hot_path_stats.clear()

else:
    # Zero-cost in production
    class ProfileContext:  # type: ignore[no-redef]
        def __init__(self, func_name: str) -> None:
            pass

        def add_bytes(self, count: int) -> None:
            pass

        def __enter__(self) -> ProfileContext:
            return self

        def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
            pass

    def get_hot_path_stats() -> dict[str, HotPathStats]:
        return {}

    def clear_hot_path_stats() -> None:
        pass
