"""Coinbase Execution -- retry and circuit-breaker resilience.

MODULE MAP
──────────
  1. retry.py            ─ ExponentialBackoff, RetryContext
  2. circuit_breaker.py  ─ CircuitBreaker, CircuitState, CircuitStats, Admission
  3. pipeline.py         ─ ResiliencePipeline (breaker ∘ retry)
"""

from .circuit_breaker import Admission, CircuitBreaker, CircuitState, CircuitStats
from .pipeline import ResiliencePipeline
from .retry import ExponentialBackoff, RetryContext, RetryStrategy

__all__ = [
    "Admission",
    "CircuitBreaker",
    "CircuitState",
    "CircuitStats",
    "ExponentialBackoff",
    "ResiliencePipeline",
    "RetryContext",
    "RetryStrategy",
]
