"""Lambda handler for KMS custom resources."""

from custom_resource import CustomResource
from resources.kms_alias import delete_alias, ensure_alias

create_kms_key_alias = CustomResource(
    name="createKmsKeyAlias",
    physical_key="AliasName",
    apply=ensure_alias,
    remove=delete_alias,
)
