"""
Dispatch logic for the Plaid proxy.

Operations are looked up in a closed registry, caller parameter names are
normalized to camelCase, bound to the operation's positional order and the
provider method is invoked.
"""

from plaid_proxy.logic.binder import bind_arguments
from plaid_proxy.logic.dispatcher import Dispatcher
from plaid_proxy.logic.normalizer import normalize_keys, snake_to_camel
from plaid_proxy.logic.registry import REGISTRY, Operation, lookup, resolve_operation

__all__ = [
    'Dispatcher',
    'Operation',
    'REGISTRY',
    'bind_arguments',
    'lookup',
    'normalize_keys',
    'resolve_operation',
    'snake_to_camel',
]
