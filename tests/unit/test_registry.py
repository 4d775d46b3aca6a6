"""
Unit tests for the parameter-order registry.

The registry must cover exactly the operations the Plaid client implements,
with one parameter per positional argument of the client method.
"""

import inspect

import pytest
from pydantic import ValidationError

from plaid_proxy.dal.plaid_client import PlaidClient
from plaid_proxy.logic.registry import REGISTRY, Operation, lookup, resolve_operation
from plaid_proxy.models.operation import OperationDescriptor


@pytest.fixture(scope="module")
def operation_table():
    client = PlaidClient(client_id="id", secret="secret")
    yield client.operation_table()
    client.close()


class TestLookup:
    """Test cases for registry lookup."""

    def test_lookup_known_operation(self):
        """Test that a supported name returns its descriptor."""
        descriptor = lookup("getTransactions")

        assert descriptor is not None
        assert descriptor.name == "getTransactions"
        assert descriptor.parameter_order == ("accessToken", "startDate", "endDate", "options")

    def test_lookup_unknown_operation(self):
        """Test that an unsupported name is not found."""
        assert lookup("doesNotExist") is None

    @pytest.mark.parametrize("name", [None, "", "GetTransactions", "get_transactions", "operation_table"])
    def test_lookup_rejects_near_misses(self, name):
        """Test that names must match an operation exactly."""
        assert lookup(name) is None
        assert resolve_operation(name) is None

    def test_zero_parameter_operations(self):
        """Test operations that take no arguments."""
        assert lookup("getCategories").parameter_order == ()
        assert lookup("listPaymentRecipients").parameter_order == ()

    def test_create_payment_uses_camel_case_recipient(self):
        """Test that every registered name is reachable after normalization."""
        assert lookup("createPayment").parameter_order == ("recipientId", "reference", "amount")

    def test_every_operation_has_one_descriptor(self):
        """Test that the registry covers the Operation enum exactly."""
        assert set(REGISTRY) == set(Operation)
        for operation, descriptor in REGISTRY.items():
            assert descriptor.name == operation.value

    def test_registered_names_are_camel_case(self):
        """Test that no registered parameter name contains a separator."""
        for descriptor in REGISTRY.values():
            for name in descriptor.parameter_order:
                assert "_" not in name and "-" not in name


class TestRegistryMatchesClient:
    """The registry and the client must agree on every operation."""

    def test_client_implements_every_operation(self, operation_table):
        """Test that the client's operation table covers the registry."""
        assert set(operation_table) == set(REGISTRY)

    @pytest.mark.parametrize("operation", list(Operation), ids=lambda operation: operation.value)
    def test_parameter_order_matches_arity(self, operation, operation_table):
        """Test that each descriptor's length equals the client method's arity."""
        parameters = inspect.signature(operation_table[operation]).parameters

        assert len(parameters) == REGISTRY[operation].arity


class TestOperationDescriptor:
    """Test cases for the descriptor model."""

    def test_descriptor_is_frozen(self):
        """Test that descriptors cannot be mutated after creation."""
        descriptor = OperationDescriptor(name="getItem", parameter_order=("accessToken",))

        with pytest.raises(ValidationError):
            descriptor.name = "removeItem"

    def test_descriptor_defaults_to_no_parameters(self):
        """Test the default parameter order."""
        descriptor = OperationDescriptor(name="getCategories")

        assert descriptor.parameter_order == ()
        assert descriptor.arity == 0

    def test_descriptor_requires_a_name(self):
        """Test that an empty name is rejected."""
        with pytest.raises(ValidationError):
            OperationDescriptor(name="")
