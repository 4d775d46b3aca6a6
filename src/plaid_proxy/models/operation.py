"""
Operation descriptor model.

A descriptor records the exact positional parameter order a provider client
method expects, keyed by the camelCase operation name callers use.
"""

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field


class OperationDescriptor(BaseModel):
    """Immutable registry entry for one supported operation."""

    model_config = ConfigDict(frozen=True)

    name: Annotated[str, Field(
        min_length=1,
        description='Operation name as supplied by callers',
        examples=['getTransactions', 'getCategories']
    )]

    parameter_order: Annotated[tuple[str, ...], Field(
        default=(),
        description='camelCase parameter names in positional order',
        examples=[('accessToken', 'startDate', 'endDate', 'options')]
    )] = ()

    @property
    def arity(self) -> int:
        """Number of positional arguments the operation takes."""
        return len(self.parameter_order)
