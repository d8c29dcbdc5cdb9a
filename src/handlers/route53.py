"""Lambda handlers for Route 53 custom resources."""

from custom_resource import CustomResource
from resources.zone import find_zone
from resources.zone_association import delete_zone_association, ensure_zone_association

get_route53_zone_by_name = CustomResource(
    name="getRoute53ZoneByName",
    physical_key="DomainName",
    apply=find_zone,
)

create_route53_zone_association = CustomResource(
    name="createRoute53ZoneAssociation",
    physical_key="HostedZoneId",
    apply=ensure_zone_association,
    remove=delete_zone_association,
)
