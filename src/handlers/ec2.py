"""Lambda handlers for EC2 custom resources."""

from custom_resource import CustomResource
from resources.image import find_image
from resources.vpc import find_vpc

get_vpc_by_name = CustomResource(
    name="getVpcByName",
    physical_key="VpcName",
    apply=find_vpc,
)

get_amazon_machine_image = CustomResource(
    name="getAmazonMachineImage",
    physical_key="Name",
    fallback_key="Regex",
    apply=find_image,
)
