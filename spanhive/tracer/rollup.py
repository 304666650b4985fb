"""Numeric field bag with additive merge semantics."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Dict, Iterator, Union

Number = Union[int, float]


class RollupFields(Mapping):
    """
    Mapping from field name to a running numeric total.

    Adding a value to an existing name sums it; merging another bag adds each
    of its entries the same way.
    """

    def __init__(self, initial: Mapping = None) -> None:
        self._values: Dict[str, Number] = {}
        if initial:
            self.merge(initial)

    def add(self, key: str, value: Number) -> None:
        self._values[key] = self._values.get(key, 0) + value

    def merge(self, other: Mapping) -> None:
        for key, value in other.items():
            self.add(key, value)

    def as_dict(self) -> Dict[str, Number]:
        return dict(self._values)

    def __getitem__(self, key: str) -> Number:
        return self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"RollupFields({self._values!r})"
