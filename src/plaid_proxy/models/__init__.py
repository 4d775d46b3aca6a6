"""
Proxy Models Package

Pydantic models for operation descriptors and response envelopes.
"""

from .operation import OperationDescriptor
from .output import DEFAULT_DISPLAY_MESSAGE, ErrorEnvelope, ProxyResponse, SuccessEnvelope

__all__ = [
    "OperationDescriptor",
    "SuccessEnvelope",
    "ErrorEnvelope",
    "ProxyResponse",
    "DEFAULT_DISPLAY_MESSAGE",
]
