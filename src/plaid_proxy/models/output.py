"""
Output models for proxy responses using Pydantic.

Every response, success or failure, is one of two envelopes. Field aliases
carry the camelCase names callers see on the wire.
"""

import traceback
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_DISPLAY_MESSAGE = 'Unknown error, please try again later.'


def _first_present(error: BaseException, attribute: str, fallback: Any) -> Any:
    # Only a missing or None attribute falls back; empty strings are kept
    value = getattr(error, attribute, None)
    return fallback if value is None else value


class SuccessEnvelope(BaseModel):
    """Envelope for a successful operation."""

    model_config = ConfigDict(populate_by_name=True)

    status: Annotated[Literal[200], Field(
        default=200,
        description='HTTP status of the proxied call'
    )] = 200

    result: Annotated[Any, Field(
        alias='json',
        description='Raw result returned by the provider'
    )] = None


class ErrorEnvelope(BaseModel):
    """Envelope for any failed request."""

    model_config = ConfigDict(populate_by_name=True)

    code: Annotated[str, Field(
        default='',
        description='Provider error code, empty when not a provider error',
        examples=['ITEM_LOGIN_REQUIRED']
    )] = ''

    type: Annotated[str, Field(
        default='',
        description='Provider error category, empty when not a provider error',
        examples=['ITEM_ERROR']
    )] = ''

    message: Annotated[str, Field(
        description='Detailed error message',
        examples=['A function named doesNotExist is not available.']
    )]

    display_message: Annotated[str, Field(
        default=DEFAULT_DISPLAY_MESSAGE,
        alias='displayMessage',
        description='User-facing error text'
    )] = DEFAULT_DISPLAY_MESSAGE

    stack: Annotated[str, Field(
        default='',
        description='Formatted traceback of the error'
    )] = ''

    @classmethod
    def from_exception(cls, error: BaseException) -> 'ErrorEnvelope':
        """
        Build an envelope from any exception.

        Provider errors contribute error_code, error_type, error_message and
        display_message; other exceptions fall back to their message text.
        """
        return cls(
            code=str(_first_present(error, 'error_code', '')),
            type=str(_first_present(error, 'error_type', '')),
            message=str(_first_present(error, 'error_message', str(error))),
            display_message=str(_first_present(error, 'display_message', DEFAULT_DISPLAY_MESSAGE)),
            stack=''.join(traceback.format_exception(type(error), error, error.__traceback__)),
        )


class ProxyResponse(BaseModel):
    """HTTP status code and envelope produced for one request."""

    status_code: Annotated[Literal[200, 500], Field(
        description='HTTP status code of the response'
    )]

    envelope: Union[SuccessEnvelope, ErrorEnvelope]

    @classmethod
    def success(cls, result: Any) -> 'ProxyResponse':
        return cls(status_code=200, envelope=SuccessEnvelope(result=result))

    @classmethod
    def failure(cls, error: BaseException) -> 'ProxyResponse':
        return cls(status_code=500, envelope=ErrorEnvelope.from_exception(error))

    @property
    def is_success(self) -> bool:
        return self.status_code == 200

    def to_body(self) -> str:
        """Serialize the envelope with its wire field names."""
        return self.envelope.model_dump_json(by_alias=True)
