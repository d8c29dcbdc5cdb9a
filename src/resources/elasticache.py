"""ElastiCache cluster and replication group lookups."""

import logging
from typing import Any

from aws_client import AwsClient
from constants import AVAILABLE_CACHE_STATUSES
from criteria import non_empty_string
from fetcher import fan_out
from matching import match
from models import Candidate, Criterion, NotFoundError, ProviderError
from utils import unique

logger = logging.getLogger(__name__)

CLUSTER_LABEL = "ElastiCache cluster"
REPLICATION_GROUP_LABEL = "Replication Group"


def cluster_candidate(cluster: dict[str, Any]) -> Candidate:
    """Build a candidate from a DescribeCacheClusters record."""
    return Candidate(
        id=cluster["CacheClusterId"],
        attributes=cluster,
        status=cluster.get("CacheClusterStatus"),
    )


def _active_security_group_ids(cluster: Candidate) -> list[str]:
    return [
        sg["SecurityGroupId"]
        for sg in cluster.get("SecurityGroups", [])
        if sg.get("Status") == "active"
    ]


def _describe_clusters(client: AwsClient, cluster_id: str, show_node_info: bool) -> list[Candidate]:
    try:
        clusters = client.describe_cache_clusters(cluster_id, show_node_info=show_node_info)
    except ProviderError as e:
        if e.code == "CacheClusterNotFound":
            return []
        raise
    return [cluster_candidate(c) for c in clusters]


def find_cache_cluster(properties: dict[str, Any], client: AwsClient) -> dict[str, Any]:
    """Find a cache cluster by ID.

    Returns:
        Dict describing the cluster endpoint, engine and security groups
    """
    cluster_id = non_empty_string(properties, "CacheClusterId")

    candidates = _describe_clusters(client, cluster_id, show_node_info=False)
    mandatory = Criterion("CacheClusterId", lambda c: c.id == cluster_id)
    cluster = match(candidates, mandatory, label=CLUSTER_LABEL).require_unique(
        CLUSTER_LABEL, AVAILABLE_CACHE_STATUSES
    )

    endpoint = cluster.get("ConfigurationEndpoint")
    configuration_endpoint = f"{endpoint['Address']}:{endpoint['Port']}" if endpoint else ""

    return {
        "CacheClusterId": cluster.id,
        "ConfigurationEndpoint": configuration_endpoint,
        "CacheNodeType": cluster.get("CacheNodeType"),
        "Engine": cluster.get("Engine"),
        "EngineVersion": cluster.get("EngineVersion"),
        "CacheSecurityGroups": [
            sg["CacheSecurityGroupName"]
            for sg in cluster.get("CacheSecurityGroups", [])
            if sg.get("Status") == "active"
        ],
        "CacheSubnetGroupName": cluster.get("CacheSubnetGroupName"),
        "SecurityGroups": _active_security_group_ids(cluster),
    }


def find_replication_group_security_groups(
    properties: dict[str, Any], client: AwsClient
) -> dict[str, Any]:
    """Collect the security groups of a replication group's member clusters.

    The replication group is matched on its description. Member clusters are
    described concurrently and must all be available.

    Returns:
        Dict with SecurityGroups (list) and SecurityGroupsIds (comma-joined)
    """
    description = non_empty_string(properties, "Description")

    groups = [
        Candidate(id=rg["ReplicationGroupId"], attributes=rg, status=rg.get("Status"))
        for rg in client.list_replication_groups()
    ]
    mandatory = Criterion("Description", lambda c: c.get("Description") == description)
    group = match(groups, mandatory, label=REPLICATION_GROUP_LABEL).require_unique(
        REPLICATION_GROUP_LABEL, AVAILABLE_CACHE_STATUSES
    )

    members = group.get("MemberClusters") or []
    if not members:
        raise NotFoundError(f"No member clusters found for Replication Group {group.id}.")

    described = fan_out(
        members, lambda name: _describe_clusters(client, name, show_node_info=True)
    )

    security_groups: list[str] = []
    for name, clusters in zip(members, described):
        mandatory = Criterion("CacheClusterId", lambda c, name=name: c.id == name)
        cluster = match(clusters, mandatory, label=CLUSTER_LABEL).require_unique(
            CLUSTER_LABEL, AVAILABLE_CACHE_STATUSES
        )
        security_groups.extend(_active_security_group_ids(cluster))

    security_groups = unique(security_groups)
    return {
        "SecurityGroups": security_groups,
        "SecurityGroupsIds": ",".join(security_groups),
    }
