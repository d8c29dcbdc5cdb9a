"""Prometheus metrics for the custom resource handlers."""

from prometheus_client import Counter, Gauge, Histogram, Info

# Invocation metrics
INVOCATIONS_TOTAL = Counter(
    "custom_resource_invocations_total",
    "Total number of custom resource invocations",
    ["resource", "operation", "status"],
)

INVOCATION_DURATION = Histogram(
    "custom_resource_invocation_duration_seconds",
    "Time spent handling an invocation",
    ["resource", "operation"],
    buckets=(0.1, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0, 120.0),
)

INVOCATIONS_IN_PROGRESS = Gauge(
    "custom_resource_invocations_in_progress",
    "Number of invocations currently in progress",
    ["resource"],
)

# AWS API metrics
AWS_API_CALLS = Counter(
    "custom_resource_aws_api_calls_total",
    "Total number of AWS API calls",
    ["service", "operation", "status"],
)

AWS_API_DURATION = Histogram(
    "custom_resource_aws_api_duration_seconds",
    "Time spent in AWS API calls",
    ["service", "operation"],
    buckets=(0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
)

RATE_LIMIT_WAIT_SECONDS = Histogram(
    "custom_resource_rate_limit_wait_seconds",
    "Time spent waiting for a rate limit slot",
    buckets=(0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5),
)

# Matching and convergence metrics
MATCH_OUTCOMES = Counter(
    "custom_resource_match_outcomes_total",
    "Match results by resource and outcome",
    ["resource", "outcome"],
)

CONVERGENCE_TICKS = Histogram(
    "custom_resource_convergence_ticks",
    "Number of poll ticks spent waiting for convergence",
    ["result"],
    buckets=(1, 2, 3, 5, 10, 20, 30, 60),
)

RUNTIME_INFO = Info(
    "custom_resource_runtime",
    "Information about the custom resource runtime",
)

RESOURCES = [
    "getRoute53ZoneByName",
    "getElastiCacheClusterByName",
    "getReplicationGroupSecurityGroups",
    "getStackOutputs",
    "getVpcByName",
    "getAmazonMachineImage",
    "createKmsKeyAlias",
    "createRoute53ZoneAssociation",
]


def set_runtime_info(version: str, region: str) -> None:
    """Set runtime info labels."""
    RUNTIME_INFO.info({"version": version, "region": region})


def init_metrics() -> None:
    """Initialize all metrics with zero values.

    Prometheus metrics with labels don't appear until used.
    This ensures all metrics are visible immediately.
    """
    operations = ["create", "update", "delete"]
    statuses = ["success", "error"]

    for resource in RESOURCES:
        INVOCATIONS_IN_PROGRESS.labels(resource=resource).set(0)
        for operation in operations:
            INVOCATION_DURATION.labels(resource=resource, operation=operation)
            for status in statuses:
                INVOCATIONS_TOTAL.labels(
                    resource=resource, operation=operation, status=status
                )
