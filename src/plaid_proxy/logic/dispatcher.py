"""
Dispatcher - resolves, binds and invokes one proxied operation.

A request ends in exactly one of three ways: the operation is not available,
the parameter source is malformed, or the operation is invoked and its result
or failure is wrapped in an envelope. Nothing is retried.
"""

import asyncio
import inspect
import json
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional, Protocol, Tuple

from plaid_proxy.handlers.utils.errors import (
    ErrorCategory,
    MalformedParametersError,
    UnsupportedOperationError,
)
from plaid_proxy.handlers.utils.observability import count, logger, tracer
from plaid_proxy.logic.binder import bind_arguments
from plaid_proxy.logic.normalizer import normalize_keys
from plaid_proxy.logic.registry import REGISTRY, Operation, resolve_operation
from plaid_proxy.models.output import ProxyResponse

OperationHandler = Callable[..., Any]


class SupportsOperationTable(Protocol):
    """A provider client that can list the handler of every operation it implements."""

    def operation_table(self) -> Mapping[Operation, OperationHandler]:
        ...


async def _await_result(awaitable: Awaitable[Any]) -> Any:
    return await awaitable


class Dispatcher:
    """Dispatches named operations to a fixed table of handlers."""

    def __init__(self, handlers: Mapping[Operation, OperationHandler]) -> None:
        """
        Initialize the dispatcher.

        Args:
            handlers: Handler per operation; operations without one are reported as unavailable
        """
        self._handlers: Dict[Operation, OperationHandler] = dict(handlers)

    @classmethod
    def for_client(cls, client: SupportsOperationTable) -> 'Dispatcher':
        """Build a dispatcher over every operation a provider client implements."""
        return cls(client.operation_table())

    def _resolve(self, operation_name: Optional[str]) -> Tuple[Operation, OperationHandler]:
        operation = resolve_operation(operation_name)
        if operation is None or operation not in self._handlers:
            raise UnsupportedOperationError(operation_name)
        return operation, self._handlers[operation]

    @staticmethod
    def _parameter_bag(body: Any, query_parameters: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
        # The body wins outright when present; it is never merged with the query string
        if not body:
            return dict(query_parameters or {})
        if isinstance(body, Mapping):
            return dict(body)

        try:
            parsed = json.loads(body)
        except (TypeError, ValueError) as e:
            raise MalformedParametersError(str(e)) from e

        if not isinstance(parsed, dict):
            raise MalformedParametersError("Request body must be a JSON object")
        return parsed

    @tracer.capture_method
    def invoke(self, operation_name: Optional[str], body: Any = None, query_parameters: Optional[Mapping[str, Any]] = None) -> Any:
        """
        Invoke an operation and return its raw result.

        Raises:
            UnsupportedOperationError: If the operation is not available
            MalformedParametersError: If the body is not a JSON object
            Exception: Whatever the provider raises
        """
        operation, handler = self._resolve(operation_name)
        bag = self._parameter_bag(body, query_parameters)
        descriptor = REGISTRY[operation]
        normalized = normalize_keys(bag)
        arguments = bind_arguments(descriptor, normalized)

        # Log parameter names only; values carry access tokens
        logger.info("Invoking provider operation", extra={
            "operation": operation.value,
            "parameter_source": "body" if body else "query",
            "supplied_parameters": [name for name in descriptor.parameter_order if name in normalized],
        })

        # Zero-parameter operations are called without arguments, not with an empty list
        result = handler(*arguments) if arguments else handler()
        if inspect.isawaitable(result):
            result = asyncio.run(_await_result(result))
        return result

    def dispatch(self, operation_name: Optional[str], body: Any = None, query_parameters: Optional[Mapping[str, Any]] = None) -> ProxyResponse:
        """
        Handle one request and wrap the outcome in an envelope.

        Args:
            operation_name: Requested operation name
            body: Raw request body, used as the parameter source when present
            query_parameters: Query-string mapping, used when there is no body

        Returns:
            A 200 success response or a 500 error response
        """
        tracer.put_annotation("operation", str(operation_name))

        try:
            result = self.invoke(operation_name, body, query_parameters)
        except UnsupportedOperationError as e:
            logger.warning("Operation not available", extra={
                "operation": operation_name,
                "error_category": e.category.value,
            })
            count("UnsupportedOperation")
            return ProxyResponse.failure(e)
        except MalformedParametersError as e:
            logger.warning("Malformed parameter source", extra={
                "operation": operation_name,
                "error": e.message,
                "error_category": e.category.value,
            })
            count("MalformedRequest")
            return ProxyResponse.failure(e)
        except Exception as e:
            logger.exception("Provider operation failed", extra={
                "operation": operation_name,
                "error_category": ErrorCategory.UPSTREAM.value,
                "error_type": type(e).__name__,
                "error_code": getattr(e, "error_code", None),
            })
            count("OperationError")
            return ProxyResponse.failure(e)

        count("OperationSuccess")
        return ProxyResponse.success(result)
