"""Lambda handlers for ElastiCache custom resources."""

from custom_resource import CustomResource
from resources.elasticache import find_cache_cluster, find_replication_group_security_groups

get_elasticache_cluster_by_name = CustomResource(
    name="getElastiCacheClusterByName",
    physical_key="CacheClusterId",
    apply=find_cache_cluster,
)

get_replication_group_security_groups = CustomResource(
    name="getReplicationGroupSecurityGroups",
    physical_key="Description",
    apply=find_replication_group_security_groups,
)
