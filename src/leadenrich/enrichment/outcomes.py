"""
Per-call result wrapper for provider invocations.
"""
from __future__ import annotations

import asyncio
import inspect
import time
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Awaitable, Callable, Optional, Union

from src.leadenrich.cache.base import utcnow
from src.leadenrich.providers.base import provider_name


class Stage(str, Enum):
    """Pipeline stages in execution order."""

    NORMALIZE = "normalize"
    GEOCODE = "geocode"
    PROPERTY = "property"
    PEOPLE = "people"
    PHONE_VERIFY = "phoneVerify"


@dataclass(frozen=True)
class CallOutcome:
    """
    Result of one provider call within a stage.

    Exactly one of ``value`` (ok=True) or ``error`` (ok=False) is meaningful.
    """

    provider: str
    stage: Stage
    ok: bool
    value: Any = None
    error: Optional[str] = None
    duration_ms: float = 0.0
    at: datetime = field(default_factory=utcnow)

    @property
    def source(self) -> str:
        """Provenance tag, e.g. ``GoogleProvider:geocode``."""
        return f"{self.provider}:{self.stage.value}"

    def to_dict(self) -> dict:
        return {
            "provider": self.provider,
            "stage": self.stage.value,
            "ok": self.ok,
            "error": self.error,
            "duration_ms": self.duration_ms,
            "at": self.at.isoformat(),
        }


def describe_error(error: BaseException) -> str:
    message = str(error)
    return f"{type(error).__name__}: {message}" if message else type(error).__name__


async def invoke(
    provider: object,
    stage: Stage,
    call: Callable[[Any], Union[Awaitable[Any], Any]],
    coerce: Optional[Callable[[Any], Any]] = None,
    timeout: Optional[float] = None,
) -> CallOutcome:
    """
    Call one provider capability and capture the result.

    The call is bounded by ``timeout`` seconds. Capabilities written as plain
    functions run on a worker thread, so a blocking call is bounded too.
    Raised errors, timeouts and results that fail ``coerce`` all come back as
    ok=False; only cancellation of the surrounding task propagates.

    Args:
        provider: Provider instance
        stage: Stage being executed
        call: Receives the provider, returns the capability result (or an awaitable of it)
        coerce: Validates/converts the raw result (e.g. a pydantic model_validate)
        timeout: Seconds before the call is abandoned, None for no limit
    """
    name = provider_name(provider)

    async def _call() -> Any:
        # Plain functions run on a worker thread so wait_for can abandon them.
        result = await asyncio.to_thread(call, provider)
        if inspect.isawaitable(result):
            result = await result
        return result

    started = time.perf_counter()
    try:
        if timeout:
            value = await asyncio.wait_for(_call(), timeout)
        else:
            value = await _call()
        if coerce is not None:
            value = coerce(value)
    except asyncio.TimeoutError as e:
        return CallOutcome(
            provider=name,
            stage=stage,
            ok=False,
            error=describe_error(e) if str(e) or not timeout else f"timed out after {timeout}s",
            duration_ms=_elapsed_ms(started),
        )
    except Exception as e:
        return CallOutcome(
            provider=name,
            stage=stage,
            ok=False,
            error=describe_error(e),
            duration_ms=_elapsed_ms(started),
        )

    return CallOutcome(
        provider=name,
        stage=stage,
        ok=True,
        value=value,
        duration_ms=_elapsed_ms(started),
    )


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)
