"""Lambda entry point shared by every custom resource handler."""

import json
import logging
import os
import time
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from aws_client import AwsClient, ClientFactory
from metrics import INVOCATION_DURATION, INVOCATIONS_IN_PROGRESS, INVOCATIONS_TOTAL
from models import RequestType, ResponseStatus, ValidationError
from response import build_response_body, physical_resource_id, send_response
from utils import region_from_arn

logger = logging.getLogger(__name__)

Properties = Mapping[str, Any]
ResourceOperation = Callable[[Properties, AwsClient], dict[str, Any]]

_logging_configured = False


def configure_logging() -> None:
    """Set the root logger level from LOG_LEVEL (default: INFO)."""
    global _logging_configured

    if _logging_configured:
        return
    level = os.environ.get("LOG_LEVEL", "INFO").upper()
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    root.setLevel(level)
    _logging_configured = True


def _no_op(properties: Properties, client: AwsClient) -> dict[str, Any]:
    return {}


@dataclass(frozen=True)
class CustomResource:
    """A custom resource handler.

    Create and Update run `apply`, Delete runs `remove`. Lookup handlers
    leave `remove` unset so that Delete succeeds without touching anything.
    Instances are callable as Lambda handlers.
    """

    name: str
    physical_key: str
    apply: ResourceOperation
    remove: ResourceOperation = _no_op
    fallback_key: str | None = None

    def physical_id(self, properties: Properties) -> str:
        value = properties.get(self.physical_key)
        if value is None and self.fallback_key:
            value = properties.get(self.fallback_key)
        return physical_resource_id(self.name, value)

    def run(
        self,
        request_type: RequestType,
        properties: Properties,
        client: AwsClient,
    ) -> dict[str, Any]:
        """Run the operation for a request type without responding."""
        if request_type is RequestType.DELETE:
            return self.remove(properties, client)
        return self.apply(properties, client)

    def __call__(
        self,
        event: Mapping[str, Any],
        context: Any,
        client_factory: ClientFactory | None = None,
    ) -> dict[str, Any]:
        return handle_event(self, event, context, client_factory)


def handle_event(
    resource: CustomResource,
    event: Mapping[str, Any],
    context: Any,
    client_factory: ClientFactory | None = None,
) -> dict[str, Any]:
    """Handle one custom resource event and respond to CloudFormation.

    Failures of the resource operation are reported as FAILED responses.
    A failure to deliver the response itself propagates.

    Returns:
        The output attributes (empty on failure)
    """
    configure_logging()
    logger.info("Event: %s", json.dumps(event, default=str))

    properties: Properties = event.get("ResourceProperties") or {}
    region = region_from_arn(getattr(context, "invoked_function_arn", None))
    client = AwsClient(region=region, client_factory=client_factory)

    operation = str(event.get("RequestType", "unknown")).lower()
    start_time = time.monotonic()
    INVOCATIONS_IN_PROGRESS.labels(resource=resource.name).inc()

    data: dict[str, Any] = {}
    error: Exception | None = None
    try:
        try:
            request_type = RequestType(event.get("RequestType"))
        except ValueError:
            raise ValidationError(
                f"Unknown event RequestType: {event.get('RequestType')}"
            ) from None

        data = resource.run(request_type, properties, client)
        INVOCATIONS_TOTAL.labels(
            resource=resource.name, operation=operation, status="success"
        ).inc()
        logger.info(f"{resource.name} {operation} succeeded: {data}")

    except Exception as e:
        logger.error(f"{resource.name} {operation} failed: {e}")
        INVOCATIONS_TOTAL.labels(
            resource=resource.name, operation=operation, status="error"
        ).inc()
        error = e
        data = {}
    finally:
        INVOCATION_DURATION.labels(resource=resource.name, operation=operation).observe(
            time.monotonic() - start_time
        )
        INVOCATIONS_IN_PROGRESS.labels(resource=resource.name).dec()

    status = ResponseStatus.FAILED if error is not None else ResponseStatus.SUCCESS
    body = build_response_body(
        event,
        getattr(context, "log_stream_name", None),
        resource.physical_id(properties),
        status,
        data,
        error,
    )
    send_response(event, body)
    return data
