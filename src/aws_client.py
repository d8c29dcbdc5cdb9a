"""AWS SDK wrapper with error translation and per-invocation clients."""

import logging
import os
import threading
import time
from collections.abc import Callable
from functools import wraps
from typing import Any, ParamSpec, TypeVar

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from metrics import AWS_API_CALLS, AWS_API_DURATION
from models import ProviderError

logger = logging.getLogger(__name__)

P = ParamSpec("P")
T = TypeVar("T")

ClientFactory = Callable[[str], Any]


def api_call(service: str) -> Callable[[Callable[P, T]], Callable[P, T]]:
    """Decorator translating SDK failures into ProviderError.

    Calls are not retried: every provider failure is terminal to the
    invocation. Call counts and durations are recorded per operation.
    """

    def decorator(func: Callable[P, T]) -> Callable[P, T]:
        @wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            operation = func.__name__
            start = time.monotonic()
            try:
                result = func(*args, **kwargs)
            except ClientError as e:
                error = e.response.get("Error", {})
                code = error.get("Code", "Unknown")
                AWS_API_CALLS.labels(
                    service=service, operation=operation, status="error"
                ).inc()
                logger.debug("%s.%s failed with %s", service, operation, code)
                raise ProviderError(
                    f"{operation} failed: {code}: {error.get('Message', e)}",
                    code=code,
                ) from e
            except BotoCoreError as e:
                AWS_API_CALLS.labels(
                    service=service, operation=operation, status="error"
                ).inc()
                raise ProviderError(
                    f"{operation} failed: {e}", code="BotoCoreError"
                ) from e
            finally:
                AWS_API_DURATION.labels(service=service, operation=operation).observe(
                    time.monotonic() - start
                )

            AWS_API_CALLS.labels(
                service=service, operation=operation, status="success"
            ).inc()
            return result

        return wrapper

    return decorator


class AwsClient:
    """Wrapper around boto3 with convenience methods.

    One instance is created per invocation; service clients are created
    lazily and never shared across invocations.
    """

    def __init__(
        self,
        region: str | None = None,
        client_factory: ClientFactory | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            region: AWS region (default: AWS_REGION or AWS_DEFAULT_REGION env)
            client_factory: Builds a low-level client for a service name
                (default: a boto3 session bound to the region)
        """
        self.region = (
            region
            or os.environ.get("AWS_REGION")
            or os.environ.get("AWS_DEFAULT_REGION")
        )
        self._client_factory = client_factory
        self._session: boto3.session.Session | None = None
        self._clients: dict[str, Any] = {}
        self._lock = threading.Lock()

    def _service(self, name: str) -> Any:
        """Get or create the low-level client for a service (thread-safe)."""
        with self._lock:
            if name not in self._clients:
                if self._client_factory is not None:
                    self._clients[name] = self._client_factory(name)
                else:
                    if self._session is None:
                        logger.debug("Creating boto3 session in region %s", self.region)
                        self._session = boto3.session.Session(region_name=self.region)
                    self._clients[name] = self._session.client(name)
            return self._clients[name]

    def _paginate(self, service: str, operation: str, key: str, **params: Any) -> list[Any]:
        """Collect every item of a paginated list operation."""
        paginator = self._service(service).get_paginator(operation)
        items: list[Any] = []
        for page in paginator.paginate(**params):
            items.extend(page.get(key, []))
        return items

    # -------------------------------------------------------------------------
    # Route 53 operations
    # -------------------------------------------------------------------------

    @api_call("route53")
    def list_hosted_zones(self) -> list[dict[str, Any]]:
        """List all hosted zones."""
        return self._paginate("route53", "list_hosted_zones", "HostedZones")

    @api_call("route53")
    def get_hosted_zone(self, zone_id: str) -> dict[str, Any]:
        """Get a hosted zone with its VPC associations."""
        logger.debug("getHostedZone %s", zone_id)
        response = self._service("route53").get_hosted_zone(Id=zone_id)
        return {"HostedZone": response["HostedZone"], "VPCs": response.get("VPCs", [])}

    @api_call("route53")
    def list_hosted_zone_tags(self, zone_id: str) -> list[dict[str, str]]:
        """List the tags of a hosted zone."""
        logger.debug("listTagsForResource %s", zone_id)
        response = self._service("route53").list_tags_for_resource(
            ResourceType="hostedzone", ResourceId=zone_id
        )
        return response["ResourceTagSet"].get("Tags", [])

    @api_call("route53")
    def associate_vpc_with_hosted_zone(
        self,
        zone_id: str,
        vpc_id: str,
        vpc_region: str | None,
        comment: str | None = None,
    ) -> str:
        """Associate a VPC with a private hosted zone.

        Returns:
            The change ID to poll for propagation
        """
        params: dict[str, Any] = {
            "HostedZoneId": zone_id,
            "VPC": {"VPCId": vpc_id, "VPCRegion": vpc_region},
        }
        if comment:
            params["Comment"] = comment
        logger.info("Associating VPC %s with hosted zone %s", vpc_id, zone_id)
        response = self._service("route53").associate_vpc_with_hosted_zone(**params)
        return response["ChangeInfo"]["Id"]

    @api_call("route53")
    def disassociate_vpc_from_hosted_zone(
        self, zone_id: str, vpc_id: str, vpc_region: str | None
    ) -> str:
        """Disassociate a VPC from a private hosted zone."""
        logger.info("Disassociating VPC %s from hosted zone %s", vpc_id, zone_id)
        response = self._service("route53").disassociate_vpc_from_hosted_zone(
            HostedZoneId=zone_id,
            VPC={"VPCId": vpc_id, "VPCRegion": vpc_region},
        )
        return response["ChangeInfo"]["Id"]

    @api_call("route53")
    def get_change_status(self, change_id: str) -> str:
        """Get the propagation status of a Route 53 change."""
        response = self._service("route53").get_change(Id=change_id)
        return response["ChangeInfo"]["Status"]

    # -------------------------------------------------------------------------
    # ElastiCache operations
    # -------------------------------------------------------------------------

    @api_call("elasticache")
    def describe_cache_clusters(
        self, cluster_id: str, show_node_info: bool = False
    ) -> list[dict[str, Any]]:
        """Describe a cache cluster by ID."""
        logger.debug("describeCacheClusters %s", cluster_id)
        response = self._service("elasticache").describe_cache_clusters(
            CacheClusterId=cluster_id, ShowCacheNodeInfo=show_node_info
        )
        return response.get("CacheClusters", [])

    @api_call("elasticache")
    def list_replication_groups(self) -> list[dict[str, Any]]:
        """List all replication groups."""
        return self._paginate(
            "elasticache", "describe_replication_groups", "ReplicationGroups"
        )

    # -------------------------------------------------------------------------
    # CloudFormation operations
    # -------------------------------------------------------------------------

    @api_call("cloudformation")
    def describe_stacks(self, stack_name: str) -> list[dict[str, Any]]:
        """Describe a stack by name or ID."""
        logger.debug("describeStacks %s", stack_name)
        response = self._service("cloudformation").describe_stacks(StackName=stack_name)
        return response.get("Stacks", [])

    # -------------------------------------------------------------------------
    # EC2 operations
    # -------------------------------------------------------------------------

    @api_call("ec2")
    def list_vpcs(self, filters: list[dict[str, Any]]) -> list[dict[str, Any]]:
        """List VPCs matching EC2 filters."""
        return self._paginate("ec2", "describe_vpcs", "Vpcs", Filters=filters)

    @api_call("ec2")
    def list_subnets(self, filters: list[dict[str, Any]]) -> list[dict[str, Any]]:
        """List subnets matching EC2 filters."""
        return self._paginate("ec2", "describe_subnets", "Subnets", Filters=filters)

    @api_call("ec2")
    def describe_images(
        self,
        owners: list[str],
        executable_users: list[str],
        filters: list[dict[str, Any]],
    ) -> list[dict[str, Any]]:
        """Describe machine images."""
        logger.debug(
            "describeImages owners=%s executable_users=%s filters=%s",
            owners,
            executable_users,
            filters,
        )
        response = self._service("ec2").describe_images(
            Owners=owners, ExecutableUsers=executable_users, Filters=filters
        )
        return response.get("Images", [])

    # -------------------------------------------------------------------------
    # KMS operations
    # -------------------------------------------------------------------------

    @api_call("kms")
    def list_aliases(self) -> list[dict[str, Any]]:
        """List all KMS key aliases."""
        return self._paginate("kms", "list_aliases", "Aliases")

    @api_call("kms")
    def create_alias(self, alias_name: str, target_key_id: str) -> None:
        """Create a key alias."""
        logger.info("Creating alias %s -> %s", alias_name, target_key_id)
        self._service("kms").create_alias(AliasName=alias_name, TargetKeyId=target_key_id)

    @api_call("kms")
    def update_alias(self, alias_name: str, target_key_id: str) -> None:
        """Point an existing alias at another key."""
        logger.info("Updating alias %s -> %s", alias_name, target_key_id)
        self._service("kms").update_alias(AliasName=alias_name, TargetKeyId=target_key_id)

    @api_call("kms")
    def delete_alias(self, alias_name: str) -> None:
        """Delete a key alias."""
        logger.info("Deleting alias %s", alias_name)
        self._service("kms").delete_alias(AliasName=alias_name)
