"""
Environment variable models for type-safe configuration.

Credentials and the Plaid environment selector are read once per process,
the first time the proxy handler needs a client.
"""

from typing import Annotated, Any

from aws_lambda_env_modeler import get_environment_variables
from pydantic import BaseModel, Field, field_validator

from plaid_proxy.dal.plaid_client import PlaidEnvironment


class ProxyEnvVars(BaseModel):
    """Environment variables for the Plaid proxy handler."""

    PLAID_CLIENT_ID: Annotated[str, Field(
        default='',
        description='Plaid client identifier'
    )] = ''

    PLAID_SECRET: Annotated[str, Field(
        default='',
        description='Plaid secret for the selected environment'
    )] = ''

    # Legacy credential, only sent by endpoints that still accept it
    PLAID_PUBLIC_KEY: Annotated[str, Field(
        default='',
        description='Legacy Plaid public key'
    )] = ''

    PLAID_ENVIRONMENT: Annotated[PlaidEnvironment, Field(
        default=PlaidEnvironment.SANDBOX,
        description='Plaid environment selecting the upstream base URL'
    )] = PlaidEnvironment.SANDBOX

    PLAID_API_VERSION: Annotated[str, Field(
        default='2020-09-14',
        description='Value of the Plaid-Version header sent upstream'
    )] = '2020-09-14'

    PLAID_TIMEOUT_SECONDS: Annotated[float, Field(
        default=30.0,
        description='HTTP timeout for upstream Plaid calls in seconds',
        gt=0,
        le=900
    )] = 30.0

    POWERTOOLS_SERVICE_NAME: Annotated[str, Field(
        default='plaid-proxy',
        description='Service name for AWS Powertools'
    )] = 'plaid-proxy'

    POWERTOOLS_METRICS_NAMESPACE: Annotated[str, Field(
        default='PlaidProxy',
        description='Namespace for CloudWatch metrics'
    )] = 'PlaidProxy'

    LOG_LEVEL: Annotated[str, Field(
        default='INFO',
        description='Log level for application logging',
        pattern=r'^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$'
    )] = 'INFO'

    @field_validator('PLAID_ENVIRONMENT', mode='before')
    @classmethod
    def default_unknown_environment(cls, value: Any) -> PlaidEnvironment:
        """Fall back to sandbox when the selector is unset or unrecognized."""
        try:
            return PlaidEnvironment(str(value).strip().lower())
        except ValueError:
            return PlaidEnvironment.SANDBOX


def get_proxy_env_vars() -> ProxyEnvVars:
    """
    Get typed environment variables for the proxy handler.

    Returns:
        Validated environment variables model instance
    """
    return get_environment_variables(model=ProxyEnvVars)
