"""Lambda handlers for the custom resources.

Each module exposes CustomResource instances usable directly as Lambda
handlers, e.g. `handlers.kms.create_kms_key_alias`:
- Route 53: hosted zone lookup, VPC association
- ElastiCache: cluster lookup, replication group security groups
- CloudFormation: stack outputs
- EC2: VPC lookup, machine image lookup
- KMS: key alias
"""

from custom_resource import CustomResource
from handlers.cloudformation import get_stack_outputs_handler
from handlers.ec2 import get_amazon_machine_image, get_vpc_by_name
from handlers.elasticache import (
    get_elasticache_cluster_by_name,
    get_replication_group_security_groups,
)
from handlers.kms import create_kms_key_alias
from handlers.route53 import create_route53_zone_association, get_route53_zone_by_name

REGISTRY: dict[str, CustomResource] = {
    resource.name: resource
    for resource in (
        get_route53_zone_by_name,
        create_route53_zone_association,
        get_elasticache_cluster_by_name,
        get_replication_group_security_groups,
        get_stack_outputs_handler,
        get_vpc_by_name,
        get_amazon_machine_image,
        create_kms_key_alias,
    )
}


def get_resource(name: str) -> CustomResource:
    """Look up a handler by its resource name."""
    try:
        return REGISTRY[name]
    except KeyError:
        raise KeyError(
            f"Unknown custom resource {name!r}; expected one of {', '.join(sorted(REGISTRY))}"
        ) from None
