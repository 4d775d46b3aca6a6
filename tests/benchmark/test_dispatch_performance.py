"""
Performance benchmark tests for the Plaid proxy.

The dispatch path runs on every request before the upstream call, so these
benchmarks guard it against regressions.
"""

import json

import pytest

from plaid_proxy.logic.binder import bind_arguments
from plaid_proxy.logic.normalizer import normalize_keys
from plaid_proxy.logic.registry import lookup


@pytest.mark.benchmark
class TestParameterPerformance:
    """Benchmark tests for parameter handling."""

    def test_normalize_keys_performance(self, benchmark):
        """Benchmark normalization of a mixed-convention bag."""
        bag = {
            "access_token": "tok1",
            "start_date": "2020-01-01",
            "end-date": "2020-01-31",
            "options": {"count": 100},
            "webhookCode": "DEFAULT_UPDATE",
        }

        result = benchmark(normalize_keys, bag)

        assert result["accessToken"] == "tok1"
        assert result["endDate"] == "2020-01-31"

    def test_bind_arguments_performance(self, benchmark):
        descriptor = lookup("getTransactions")
        bag = {"accessToken": "tok1", "startDate": "2020-01-01", "endDate": "2020-01-31"}

        result = benchmark(bind_arguments, descriptor, bag)

        assert result == ["tok1", "2020-01-01", "2020-01-31", None]

    def test_lookup_performance(self, benchmark):
        result = benchmark(lookup, "getAllTransactions")

        assert result.name == "getAllTransactions"


@pytest.mark.benchmark
class TestDispatchPerformance:
    """Benchmark tests for a full dispatch."""

    def test_successful_dispatch_performance(self, benchmark, dispatcher):
        """Benchmark parse, normalize, bind, invoke and wrap."""
        body = json.dumps({"access_token": "tok1", "startDate": "2020-01-01", "endDate": "2020-01-31"})

        response = benchmark(dispatcher.dispatch, "getTransactions", body=body)

        assert response.status_code == 200

    def test_failed_dispatch_performance(self, benchmark, dispatcher):
        """Benchmark building an error envelope for an unknown operation."""
        response = benchmark(dispatcher.dispatch, "doesNotExist", body="{}")

        assert response.status_code == 500
