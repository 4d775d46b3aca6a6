"""Binding of normalized parameters to an operation's positional order."""

from typing import Any, List, Mapping

from plaid_proxy.models.operation import OperationDescriptor


def bind_arguments(descriptor: OperationDescriptor, bag: Mapping[str, Any]) -> List[Any]:
    """
    Produce the positional argument list for an operation.

    Args:
        descriptor: Registry entry of the operation being invoked
        bag: Parameter bag with camelCase keys

    Returns:
        One value per name in the descriptor's parameter order, None for missing names
    """
    return [bag.get(name) for name in descriptor.parameter_order]
