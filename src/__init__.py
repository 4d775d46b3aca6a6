"""
Plaid Proxy - Source Package

This package contains the Lambda entry point and the plaid_proxy service
package it delegates to.
"""

__version__ = "1.0.0"

__all__ = [
    "__version__",
]
