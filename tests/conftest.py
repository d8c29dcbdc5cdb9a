"""Shared fixtures: in-memory stand-ins for boto3 low-level clients."""

import threading
from typing import Any

import pytest
from botocore.exceptions import ClientError

from aws_client import AwsClient


def client_error(code: str, operation: str = "Operation", message: str = "") -> ClientError:
    """Build a real botocore ClientError."""
    return ClientError({"Error": {"Code": code, "Message": message}}, operation)


class FakePaginator:
    """Paginator returning canned pages."""

    def __init__(self, service: "FakeService", operation: str) -> None:
        self.service = service
        self.operation = operation

    def paginate(self, **kwargs: Any) -> list[dict[str, Any]]:
        pages = self.service._respond(self.operation, kwargs)
        return pages if isinstance(pages, list) else [pages]


class FakeService:
    """Stand-in for a boto3 low-level client.

    `responses` maps an operation name to a response dict, an exception
    instance, or a function of the call's keyword arguments returning one
    of those. Every call is recorded in `calls`.
    """

    def __init__(self, **responses: Any) -> None:
        self.responses = responses
        self.calls: list[tuple[str, dict[str, Any]]] = []
        self._lock = threading.Lock()

    def _respond(self, operation: str, kwargs: dict[str, Any]) -> Any:
        with self._lock:
            self.calls.append((operation, kwargs))
        response = self.responses[operation]
        if callable(response):
            response = response(**kwargs)
        if isinstance(response, Exception):
            raise response
        return response

    def get_paginator(self, operation: str) -> FakePaginator:
        return FakePaginator(self, operation)

    def __getattr__(self, operation: str) -> Any:
        if operation.startswith("_"):
            raise AttributeError(operation)

        def call(**kwargs: Any) -> Any:
            return self._respond(operation, kwargs)

        return call

    def called(self, operation: str) -> list[dict[str, Any]]:
        """Keyword arguments of every call to an operation."""
        return [kwargs for op, kwargs in self.calls if op == operation]


@pytest.fixture
def services() -> dict[str, FakeService]:
    """Fake services by name; tests fill in the ones they need."""
    return {}


@pytest.fixture
def client(services: dict[str, FakeService]) -> AwsClient:
    """AwsClient wired to the fake services."""
    return AwsClient(region="eu-west-1", client_factory=lambda name: services[name])


@pytest.fixture(autouse=True)
def no_wait(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep convergence waits and fan-out throttling instant."""
    monkeypatch.setenv("CONVERGENCE_WAIT_INTERVAL", "0")
    monkeypatch.setenv("AWS_REQUESTS_PER_SECOND", "0")
