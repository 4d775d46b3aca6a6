"""
Provider access layer for the Plaid proxy.

This package holds the upstream Plaid client and the factory that builds the
process-wide instance from configuration.
"""

from typing import TYPE_CHECKING

from plaid_proxy.dal.plaid_client import PLAID_BASE_URLS, PlaidClient, PlaidEnvironment, PlaidError

if TYPE_CHECKING:
    from plaid_proxy.handlers.models.env_vars import ProxyEnvVars


def get_plaid_client(env_vars: 'ProxyEnvVars') -> PlaidClient:
    """
    Factory function to build the Plaid client from configuration.

    Args:
        env_vars: Validated proxy environment variables

    Returns:
        Plaid client bound to the configured environment
    """
    return PlaidClient(
        client_id=env_vars.PLAID_CLIENT_ID,
        secret=env_vars.PLAID_SECRET,
        environment=env_vars.PLAID_ENVIRONMENT,
        public_key=env_vars.PLAID_PUBLIC_KEY,
        api_version=env_vars.PLAID_API_VERSION,
        timeout=env_vars.PLAID_TIMEOUT_SECONDS,
    )


__all__ = [
    'PLAID_BASE_URLS',
    'PlaidClient',
    'PlaidEnvironment',
    'PlaidError',
    'get_plaid_client',
]
