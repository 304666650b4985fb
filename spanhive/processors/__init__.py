"""Event processors and sampling."""

from spanhive.processors.sampler import DeterministicSampler, SamplingDecision, should_sample
from spanhive.processors.logging_processor import LoggingEventProcessor
from spanhive.processors.simple_processor import SimpleEventProcessor

__all__ = [
    "DeterministicSampler",
    "SamplingDecision",
    "should_sample",
    "LoggingEventProcessor",
    "SimpleEventProcessor",
]
