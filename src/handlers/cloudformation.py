"""Lambda handler for CloudFormation custom resources."""

from custom_resource import CustomResource
from resources.stack import get_stack_outputs

get_stack_outputs_handler = CustomResource(
    name="getStackOutputs",
    physical_key="StackName",
    apply=get_stack_outputs,
)
