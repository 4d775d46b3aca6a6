"""
Proxy Handler - Lambda function for the Plaid proxy API.

Routes API Gateway REST events to the dispatcher and renders its envelope as
the HTTP response. The operation name comes from the path
(`/plaid/<function>`) or from the `function` query parameter (`/plaid`).
"""

import os
from typing import Any, Dict, Optional

from aws_lambda_powertools.event_handler import APIGatewayRestResolver, CORSConfig, Response, content_types
from aws_lambda_powertools.logging import correlation_paths
from aws_lambda_powertools.utilities.data_classes import APIGatewayProxyEvent
from aws_lambda_powertools.utilities.typing import LambdaContext

from plaid_proxy.dal import get_plaid_client
from plaid_proxy.handlers.models.env_vars import get_proxy_env_vars
from plaid_proxy.handlers.utils.observability import count, logger, metrics, tracer
from plaid_proxy.logic.dispatcher import Dispatcher
from plaid_proxy.models.output import ProxyResponse

PROXY_PATH = '/plaid'
OPERATION_QUERY_PARAMETER = 'function'

cors_config = CORSConfig(
    allow_origin=os.environ.get("CORS_ALLOW_ORIGIN", "*"),
    max_age=600,
    allow_headers=["content-type", "authorization"],
)

app = APIGatewayRestResolver(cors=cors_config)

# Process-wide dispatcher, built on first use from environment configuration
_dispatcher: Optional[Dispatcher] = None


def get_dispatcher() -> Dispatcher:
    """Get or create the dispatcher over the configured Plaid client."""
    global _dispatcher

    if _dispatcher is None:
        env_vars = get_proxy_env_vars()
        logger.info("Initializing Plaid client", extra={
            "plaid_environment": env_vars.PLAID_ENVIRONMENT.value,
            "client_id_configured": bool(env_vars.PLAID_CLIENT_ID),
        })
        _dispatcher = Dispatcher.for_client(get_plaid_client(env_vars))

    return _dispatcher


def to_http_response(proxy_response: ProxyResponse) -> Response:
    return Response(
        status_code=proxy_response.status_code,
        content_type=content_types.APPLICATION_JSON,
        body=proxy_response.to_body(),
    )


def request_origin(event: Dict[str, Any]) -> Optional[str]:
    origin = APIGatewayProxyEvent(event).resolved_headers_field.get("origin")
    return origin[0] if isinstance(origin, list) else origin


def fallback_response(event: Dict[str, Any], proxy_response: ProxyResponse) -> Dict[str, Any]:
    """Render an envelope outside the resolver in the same shape and with the same CORS headers."""
    headers = {"Content-Type": [content_types.APPLICATION_JSON]}
    origin = cors_config.allowed_origin(request_origin(event))
    if origin is not None:
        headers.update({name: [value] for name, value in cors_config.to_dict(origin).items()})

    return {
        "statusCode": proxy_response.status_code,
        "multiValueHeaders": headers,
        "body": proxy_response.to_body(),
        "isBase64Encoded": False,
    }


def proxy(operation_name: Optional[str]) -> Response:
    """Dispatch the current event to the named operation."""
    event = app.current_event
    proxy_response = get_dispatcher().dispatch(
        operation_name,
        body=event.decoded_body,
        query_parameters=event.query_string_parameters,
    )
    return to_http_response(proxy_response)


@app.route(f"{PROXY_PATH}/<function_name>", method=["GET", "POST"])
@tracer.capture_method
def proxy_named_operation(function_name: str) -> Response:
    return proxy(function_name)


@app.route(PROXY_PATH, method=["GET", "POST"])
@tracer.capture_method
def proxy_queried_operation() -> Response:
    query_parameters = app.current_event.query_string_parameters or {}
    return proxy(query_parameters.get(OPERATION_QUERY_PARAMETER))


@tracer.capture_lambda_handler
@logger.inject_lambda_context(correlation_id_path=correlation_paths.API_GATEWAY_REST)
@metrics.log_metrics(capture_cold_start_metric=True)
def lambda_handler(event: Dict[str, Any], context: LambdaContext) -> Dict[str, Any]:
    """
    Main Lambda handler function.

    Args:
        event: API Gateway REST proxy event
        context: Lambda context object

    Returns:
        API Gateway response
    """
    count("RequestCount")
    tracer.put_annotation("environment", os.environ.get("PLAID_ENVIRONMENT", "sandbox"))

    try:
        return app.resolve(event, context)

    except Exception as e:
        count("RequestError")
        logger.exception("Unhandled error in lambda handler", extra={"error": str(e)})

        return fallback_response(event, ProxyResponse.failure(e))
