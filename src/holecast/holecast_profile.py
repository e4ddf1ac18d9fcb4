"""
Timing of instrumented sections (discovery, index build, ray casts, placement).

Usage:
    from holecast_profile import profile, perf_marker, profiling_session

    @profile("resolve_intersections")
    def resolve(...):
        ...

    with profiling_session() as timings:
        with perf_marker("place_openings"):
            ...
    # timings -> {'place_openings': {'count': 1, 'total_ms': 0.8, ...}}

Sections are only timed inside an active session; outside one, markers and
decorated functions cost one attribute check and record nothing, so a host
process that runs many batches does not accumulate data.

Setting HOLECAST_NO_PROFILING=1 or running Python with -O removes the
instrumentation entirely: `profile` returns the function undecorated and
sessions always report empty timings. Requires process restart to take effect.
"""

import os
import time
import functools
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple, Union

_PROFILING_COMPILED_OUT = (
    os.environ.get('HOLECAST_NO_PROFILING', '').lower() in ('1', 'true', 'yes')
    or not __debug__
)

_clock = time.perf_counter


class _Recorder:
    """
    Flat event log of (section id, timestamp). Entering a section logs its id,
    leaving logs ~id, so nesting can be rebuilt after the fact.
    """

    def __init__(self):
        self.active = False
        self.events: List[Tuple[int, float]] = []
        self.names: List[str] = []
        self._ids: Dict[str, int] = {}

    def section_id(self, name: str) -> int:
        section = self._ids.get(name)
        if section is None:
            section = self._ids[name] = len(self.names)
            self.names.append(name)
        return section

    def summarize(self) -> Dict[str, Dict[str, Any]]:
        summary: Dict[str, Dict[str, Any]] = {}
        open_sections: List[Tuple[int, float]] = []

        for section, stamp in self.events:
            if section >= 0:
                open_sections.append((section, stamp))
                continue
            # Unbalanced exits come from a session started inside a section
            if not open_sections or open_sections[-1][0] != ~section:
                continue
            entered, started = open_sections.pop()
            elapsed = (stamp - started) * 1000.0

            stats = summary.get(self.names[entered])
            if stats is None:
                stats = summary[self.names[entered]] = {
                    'count': 0, 'total_ms': 0.0, 'min_ms': elapsed, 'max_ms': elapsed, 'parents': {},
                }
            stats['count'] += 1
            stats['total_ms'] += elapsed
            stats['min_ms'] = min(stats['min_ms'], elapsed)
            stats['max_ms'] = max(stats['max_ms'], elapsed)
            if open_sections:
                parent = self.names[open_sections[-1][0]]
                stats['parents'][parent] = stats['parents'].get(parent, 0) + 1

        for stats in summary.values():
            stats['avg_ms'] = round(stats['total_ms'] / stats['count'], 3)
            for key in ('total_ms', 'min_ms', 'max_ms'):
                stats[key] = round(stats[key], 3)
        return summary


_recorder = _Recorder()


class _Section:
    __slots__ = ('_enter', '_exit')

    def __init__(self, section: int):
        self._enter = section
        self._exit = ~section

    def __enter__(self):
        if _recorder.active:
            _recorder.events.append((self._enter, _clock()))
        return self

    def __exit__(self, *args):
        if _recorder.active:
            _recorder.events.append((self._exit, _clock()))
        return False


class _NoOpSection:
    __slots__ = ()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        return False


_NOOP_SECTION = _NoOpSection()


# =============================================================================
# Public API
# =============================================================================

def is_profiling() -> bool:
    return _recorder.active


def enable_profiling(enabled: bool = True) -> None:
    """Start or stop recording. Has no effect when profiling is compiled out."""
    _recorder.active = enabled and not _PROFILING_COMPILED_OUT


def reset_profile() -> None:
    """Drop everything recorded so far."""
    _recorder.events.clear()


def get_profile_results() -> Dict[str, Dict[str, Any]]:
    """
    Per-section statistics of what has been recorded.

    Returns:
        Dict mapping section names to count, total_ms, avg_ms, min_ms, max_ms
        and parents (enclosing section name -> number of nested calls).
    """
    return _recorder.summarize()


@contextmanager
def profiling_session(enabled: bool = True) -> Iterator[Dict[str, Dict[str, Any]]]:
    """
    Record for the duration of the block.

    Yields a dict that is filled with the section statistics when the block
    exits, after which recording stops and the events are discarded. With
    `enabled=False` the block runs unrecorded and the dict stays empty.
    """
    timings: Dict[str, Dict[str, Any]] = {}
    if not enabled:
        yield timings
        return

    reset_profile()
    enable_profiling()
    try:
        yield timings
    finally:
        enable_profiling(False)
        timings.update(get_profile_results())
        reset_profile()


def perf_marker(name: Optional[str] = None):
    """
    Context manager timing the enclosed block as section `name`.

    Usage:
        with perf_marker("build_surface_index"):
            ...
    """
    if _PROFILING_COMPILED_OUT:
        return _NOOP_SECTION
    return _Section(_recorder.section_id(name or "unknown"))


def profile(name_or_func: Union[str, Callable, None] = None) -> Callable:
    """
    Decorator timing every call of a function.

    Usage:
        @profile
        def cast_ray(...): ...

        @profile("resolve_intersections")
        def resolve(...): ...
    """
    def decorator(func: Callable) -> Callable:
        if _PROFILING_COMPILED_OUT:
            return func
        section = _recorder.section_id(name_or_func if isinstance(name_or_func, str) else func.__name__)
        leave = ~section

        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            if not _recorder.active:
                return func(*args, **kwargs)
            _recorder.events.append((section, _clock()))
            try:
                return func(*args, **kwargs)
            finally:
                _recorder.events.append((leave, _clock()))

        return wrapper

    if callable(name_or_func):
        return decorator(name_or_func)
    return decorator
