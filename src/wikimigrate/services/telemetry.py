"""Timing spans for service calls and pipeline phases.

Disabled by default; ``--verbose`` turns it on. When enabled, each
``@traced`` service call records a span tree (one child per
``trace_span`` block) and attaches it to ``ServiceResult.meta``.
"""

from __future__ import annotations

import functools
import time
from collections.abc import Callable, Generator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Any, ParamSpec, TypeVar

import structlog

from wikimigrate.services.result import ServiceResult

_enabled: ContextVar[bool] = ContextVar("_telemetry_enabled", default=False)
_active: ContextVar[Span | None] = ContextVar("_active_span", default=None)


@dataclass
class Span:
    """A named, timed region with nested child regions."""

    name: str
    started: float = field(default_factory=time.perf_counter)
    finished: float | None = None
    children: list[Span] = field(default_factory=list)
    fields: dict[str, Any] = field(default_factory=dict)

    @property
    def duration_ms(self) -> float:
        if self.finished is None:
            return 0.0
        return (self.finished - self.started) * 1000

    def finish(self) -> None:
        self.finished = time.perf_counter()

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"name": self.name, "duration_ms": round(self.duration_ms, 2)}
        if self.fields:
            data["fields"] = dict(self.fields)
        if self.children:
            data["children"] = [child.to_dict() for child in self.children]
        return data


@contextmanager
def trace_span(name: str, **fields: Any) -> Generator[Span | None]:
    """Time a block as a child of the active span; yields None when disabled."""
    parent = _active.get() if _enabled.get() else None
    if parent is None:
        yield None
        return

    span = Span(name=name, fields=dict(fields))
    parent.children.append(span)
    token = _active.set(span)
    try:
        yield span
    finally:
        span.finish()
        _active.reset(token)


_P = ParamSpec("_P")
_R = TypeVar("_R")


def traced(func: Callable[_P, _R]) -> Callable[_P, _R]:  # noqa: UP047
    """Record a root span around a service method and attach it to the result."""

    @functools.wraps(func)
    def wrapper(*args: _P.args, **kwargs: _P.kwargs) -> _R:
        if not _enabled.get():
            return func(*args, **kwargs)

        span = Span(name=func.__qualname__)
        token = _active.set(span)
        try:
            result = func(*args, **kwargs)
        finally:
            span.finish()
            _active.reset(token)

        structlog.get_logger("wikimigrate.telemetry").debug(
            "span.complete",
            span=span.name,
            duration_ms=round(span.duration_ms, 2),
            children=len(span.children),
        )
        if isinstance(result, ServiceResult):
            meta = {**(result.meta or {}), "telemetry": span.to_dict()}
            return result.model_copy(update={"meta": meta})  # type: ignore[return-value]
        return result

    return wrapper


def enable_telemetry() -> None:
    _enabled.set(True)


def disable_telemetry() -> None:
    _enabled.set(False)
