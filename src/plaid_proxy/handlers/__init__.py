"""
Lambda handlers for the Plaid proxy.

The handler layer turns API Gateway events into dispatcher calls and
dispatcher outcomes into HTTP responses. Powertools provides:
- Structured logging with correlation IDs
- Distributed tracing with X-Ray
- Custom metrics collection
- REST routing through the API Gateway resolver
"""

from plaid_proxy.handlers.utils.observability import logger, metrics, tracer

__all__ = [
    "logger",
    "tracer",
    "metrics",
]
