"""CloudFormation stack outputs lookup."""

import logging
from typing import Any

from aws_client import AwsClient
from constants import READABLE_STACK_STATUSES
from criteria import list_property, non_empty_string
from matching import match
from models import Candidate, Criterion, NotAvailableError, NotFoundError, ProviderError

logger = logging.getLogger(__name__)

LABEL = "Stack"


def _describe_stack(client: AwsClient, stack_name: str) -> list[Candidate]:
    try:
        stacks = client.describe_stacks(stack_name)
    except ProviderError as e:
        # DescribeStacks reports a missing stack as a ValidationError
        if e.code == "ValidationError" and "does not exist" in str(e):
            return []
        raise
    return [
        Candidate(id=s.get("StackName", stack_name), attributes=s, status=s.get("StackStatus"))
        for s in stacks
    ]


def get_stack_outputs(properties: dict[str, Any], client: AwsClient) -> dict[str, Any]:
    """Get the outputs of a stack, optionally restricted to some keys.

    Returns:
        Dict mapping output keys to output values
    """
    stack_name = non_empty_string(properties, "StackName")
    output_filter = list_property(properties, "Filter")

    candidates = _describe_stack(client, stack_name)
    # StackName may also be given as the stack ID
    mandatory = Criterion(
        "StackName", lambda c: stack_name in (c.id, c.get("StackId"))
    )
    stack = match(candidates, mandatory, label=LABEL).require_unique(LABEL)

    if stack.status not in READABLE_STACK_STATUSES:
        raise NotAvailableError(
            f'Unable to get outputs for a stack "{stack_name}" in state '
            f'"{stack.status}", aborting.'
        )

    if not output_filter:
        logger.info("No output filter was specified, will return all outputs.")

    outputs = {
        output["OutputKey"]: output["OutputValue"]
        for output in stack.get("Outputs") or []
        if not output_filter or output["OutputKey"] in output_filter
    }

    if not outputs:
        if output_filter:
            raise NotFoundError("No matching outputs were found.")
        raise NotFoundError("Stack has no outputs.")

    return outputs
