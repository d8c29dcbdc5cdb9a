"""Delivery of custom resource responses to CloudFormation."""

import json
import logging
import os
from collections.abc import Mapping
from typing import Any

import requests

from models import CallbackError, ResponseStatus

logger = logging.getLogger(__name__)


def physical_resource_id(handler_name: str, value: Any) -> str:
    """Derive the stable physical resource ID of a handler invocation.

    Example: ('getStackOutputs', 'network') -> 'getStackOutputs-network'
    """
    return f"{handler_name}-{value}"


def build_response_body(
    event: Mapping[str, Any],
    log_stream_name: str | None,
    physical_id: str,
    status: ResponseStatus,
    data: Mapping[str, Any] | None = None,
    error: BaseException | None = None,
) -> dict[str, Any]:
    """Build the JSON body of a custom resource response."""
    reason = f"{error}; " if error is not None else ""
    return {
        "StackId": event.get("StackId"),
        "RequestId": event.get("RequestId"),
        "LogicalResourceId": event.get("LogicalResourceId"),
        "PhysicalResourceId": physical_id,
        "Status": status.value,
        "Reason": f"{reason}See details in CloudWatch Log: {log_stream_name}",
        "Data": dict(data or {}),
    }


def send_response(
    event: Mapping[str, Any],
    body: Mapping[str, Any],
    timeout: float | None = None,
) -> None:
    """PUT the response body to the pre-signed URL of the event.

    Delivery is attempted once. Any transport failure or non-2xx answer
    raises CallbackError.

    Args:
        event: The custom resource event holding ResponseURL
        body: Response body from build_response_body()
        timeout: HTTP timeout in seconds (default: CALLBACK_TIMEOUT env or 30)
    """
    url = event.get("ResponseURL")
    if not url:
        raise CallbackError("The event has no ResponseURL to respond to.")

    if timeout is None:
        timeout = float(os.environ.get("CALLBACK_TIMEOUT", "30"))

    payload = json.dumps(body, default=str)
    logger.info("Response body: %s", payload)

    try:
        response = requests.put(
            url,
            data=payload,
            headers={"Content-Type": "", "Content-Length": str(len(payload))},
            timeout=timeout,
        )
        response.raise_for_status()
    except requests.RequestException as e:
        logger.error("Failed to send response: %s", e)
        raise CallbackError(f"Failed to send response: {e}") from e

    logger.info("Response sent: HTTP %d", response.status_code)
