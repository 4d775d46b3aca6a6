"""
Plaid proxy Lambda Function - Entry point for the proxy API.

This module serves as the Lambda function entry point and delegates to the
proxy handler, which routes the request, dispatches the Plaid operation and
renders the response envelope.
"""

import os
import sys
from typing import Any, Dict

# Add the service package to the Python path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from aws_lambda_powertools.utilities.typing import LambdaContext
from plaid_proxy.handlers.proxy_handler import lambda_handler as proxy_handler


def lambda_handler(event: Dict[str, Any], context: LambdaContext) -> Dict[str, Any]:
    """
    Lambda function entry point for the Plaid proxy API.

    Args:
        event: Lambda event payload (API Gateway event)
        context: Lambda context object

    Returns:
        API Gateway response dictionary
    """
    return proxy_handler(event, context)
