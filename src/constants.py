"""Constants used across the handlers."""

# Lifecycle statuses in which an ElastiCache resource may be returned
AVAILABLE_CACHE_STATUSES = frozenset({"available", "creating", "modifying"})

# Stack statuses whose outputs are safe to read
READABLE_STACK_STATUSES = frozenset(
    {"CREATE_COMPLETE", "UPDATE_COMPLETE", "UPDATE_ROLLBACK_COMPLETE"}
)

# Route 53 change status once a change has propagated
CHANGE_INSYNC = "INSYNC"

# Image fields dropped from the machine image lookup result
IMAGE_OMITTED_FIELDS = (
    "Name",
    "Description",
    "State",
    "StateReason",
    "BlockDeviceMappings",
    "ImageLocation",
    "CreationDate",
    "ProductCodes",
    "Tags",
)

# VPC fields dropped from the VPC lookup result
VPC_OMITTED_FIELDS = ("Tags", "State", "InstanceTenancy", "IsDefault")

# VPC name that selects the account's default VPC
DEFAULT_VPC_NAME = "default"
