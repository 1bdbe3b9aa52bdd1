from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Generic, Optional, TypeVar

from phrasepair.errors import ServiceError, ServiceErrorKind

T = TypeVar("T")


@dataclass(frozen=True)
class StageResult(Generic[T]):
    """Outcome of one pipeline stage: a value, or an error kind plus message."""
    value: Optional[T] = None
    error_kind: Optional[ServiceErrorKind] = None
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.error_kind is None

    @classmethod
    def success(cls, value: T) -> "StageResult[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, kind: ServiceErrorKind, message: str) -> "StageResult[T]":
        return cls(error_kind=kind, message=message)


async def run_stage(
    stage: str,
    call: Callable[..., Awaitable[T]],
    *args: Any,
    logger: Optional[logging.Logger] = None,
) -> StageResult[T]:
    logger = logger or logging.getLogger(__name__)
    try:
        value = await call(*args)
    except ServiceError as e:
        logger.warning("stage_failed", extra={"stage": stage, "kind": e.kind.value, "detail": e.message})
        return StageResult.failure(e.kind, e.message)
    except Exception as e:
        # Backends outside the taxonomy still only fail their own sentence
        logger.exception("stage_crashed", extra={"stage": stage})
        return StageResult.failure(ServiceErrorKind.UNKNOWN, str(e) or f"{stage} failed")
    return StageResult.success(value)
