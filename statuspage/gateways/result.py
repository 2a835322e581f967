"""Result values returned across gateway boundaries.

Gateways never raise to their callers. Every call resolves to a
GatewayResult that either carries a value (with its provenance) or the
reason the call failed; what to substitute on failure is decided by the
snapshot builder.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

T = TypeVar("T")


class DataSource(str, Enum):
    LIVE = "live"  # straight from the upstream
    PROBED = "probed"  # reconstructed from direct health probes
    MOCK = "mock"  # fixed representative records
    SYNTHETIC = "synthetic"  # generated history series
    DEFAULT = "default"  # hardcoded operational default


@dataclass(frozen=True)
class GatewayResult(Generic[T]):
    value: T | None = None
    error: str | None = None
    source: DataSource = DataSource.LIVE

    @classmethod
    def success(cls, value: T, source: DataSource = DataSource.LIVE) -> GatewayResult[T]:
        return cls(value=value, source=source)

    @classmethod
    def failure(cls, error: str) -> GatewayResult[T]:
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    def or_else(self, fallback: Callable[[], T], source: DataSource) -> GatewayResult[T]:
        """Keep a successful result; otherwise substitute ``fallback()``, keeping the error."""
        if self.ok:
            return self
        return GatewayResult(value=fallback(), error=self.error, source=source)
