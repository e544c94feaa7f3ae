"""
Core submodule for NetTraffic.

Contains the link registry, rate sampler, display policy and the serialized
engine that ties them together.
"""

from nettraffic.core.display_policy import DisplayPolicy, format_output
from nettraffic.core.engine import TrafficEngine, EngineMessage, MessageKind
from nettraffic.core.link_registry import LinkRegistry
from nettraffic.core.models import Link, RateEstimate, SampleState, DisplayConfig, DisplayDecision
from nettraffic.core.rate_sampler import RateSampler, CounterSource

__all__ = [
    "DisplayPolicy",
    "format_output",
    "TrafficEngine",
    "EngineMessage",
    "MessageKind",
    "LinkRegistry",
    "Link",
    "RateEstimate",
    "SampleState",
    "DisplayConfig",
    "DisplayDecision",
    "RateSampler",
    "CounterSource",
]
