"""
Plaid proxy service.

A single API Gateway endpoint that invokes a named Plaid operation with
caller-supplied parameters and returns a uniform JSON envelope:

- handlers: Lambda entry point, routing and configuration
- logic: operation registry, parameter normalization and dispatch
- dal: the upstream Plaid client
- models: operation descriptors and response envelopes
"""

__version__ = "1.0.0"
__description__ = "Serverless proxy for the Plaid API"

from plaid_proxy.logic import Dispatcher, Operation, bind_arguments, lookup, normalize_keys
from plaid_proxy.models import ErrorEnvelope, ProxyResponse, SuccessEnvelope

__all__ = [
    "Dispatcher",
    "Operation",
    "bind_arguments",
    "lookup",
    "normalize_keys",
    "ErrorEnvelope",
    "ProxyResponse",
    "SuccessEnvelope",
]
