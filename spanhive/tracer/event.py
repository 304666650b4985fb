"""Outbound event holding the fields of one span."""

from __future__ import annotations

import time
from typing import Any, Dict, Mapping, Optional, TYPE_CHECKING

from spanhive.errors import ValidationError

if TYPE_CHECKING:
    from spanhive.tracer.provider import TracerProvider


class Event:
    """
    Field bag for a single span that knows how to transmit itself.

    Transmission never re-evaluates sampling: callers decide first and then
    call transmit(). The provider hands the event to its processors.
    """

    def __init__(
        self,
        provider: "TracerProvider",
        fields: Optional[Mapping[str, Any]] = None,
        sample_rate: int = 1,
    ) -> None:
        self._provider = provider
        self._data: Dict[str, Any] = dict(fields or {})
        self.sample_rate = sample_rate
        self.timestamp_ns = time.time_ns()
        self.transmitted = False

    @property
    def data(self) -> Dict[str, Any]:
        """Current fields; hooks may read and mutate this dict in place."""
        return self._data

    @property
    def sample_rate(self) -> int:
        return self._sample_rate

    @sample_rate.setter
    def sample_rate(self, value: int) -> None:
        if isinstance(value, bool) or not isinstance(value, int) or value < 1:
            raise ValidationError("sample rate must be a positive integer", {"rate": value})
        self._sample_rate = value

    def add_field(self, name: str, value: Any) -> None:
        self._data[name] = value

    def add(self, fields: Mapping[str, Any]) -> None:
        self._data.update(fields)

    def transmit(self) -> None:
        self.transmitted = True
        self._provider.emit(self)

    def __repr__(self) -> str:
        return f"Event(sample_rate={self._sample_rate}, data={self._data!r})"
