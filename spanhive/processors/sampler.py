"""Deterministic sampling decisions for traces."""

import hashlib
import struct
from enum import Enum

from spanhive.errors import ValidationError

MAX_INT32 = 2**32 - 1


class SamplingDecision(Enum):
    UNDECIDED = 0
    KEEP = 1
    DROP = 2


class DeterministicSampler:
    """
    Sampler keyed on a string value, usually the trace id.

    The same value at the same rate always yields the same outcome, so every
    span of a trace sampled this way is kept or dropped together.
    """

    def should_sample(self, rate: int, value: str) -> bool:
        if isinstance(rate, bool) or not isinstance(rate, int) or rate < 1:
            raise ValidationError("sample rate must be a positive integer", {"rate": rate})
        if rate == 1:
            return True
        upper_bound = MAX_INT32 // rate
        digest = hashlib.sha1(value.encode("utf-8")).digest()
        (hashed,) = struct.unpack(">I", digest[:4])
        return hashed <= upper_bound


_default_sampler = DeterministicSampler()


def should_sample(rate: int, value: str) -> bool:
    return _default_sampler.should_sample(rate, value)
