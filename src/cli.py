"""Run a custom resource handler locally against a JSON property file."""

import json
import logging

import click
from prometheus_client import generate_latest

from aws_client import AwsClient
from custom_resource import configure_logging
from handlers import REGISTRY, get_resource
from metrics import init_metrics, set_runtime_info
from models import CustomResourceError, RequestType

VERSION = "0.1.0"

logger = logging.getLogger(__name__)


@click.command()
@click.version_option(VERSION)
@click.argument("resource", type=click.Choice(sorted(REGISTRY)))
@click.argument("properties_file", type=click.File("r"))
@click.option("--region", envvar="AWS_REGION", help="AWS region to query.")
@click.option(
    "--metrics", "show_metrics", is_flag=True, help="Print collected metrics after the run."
)
def main(resource: str, properties_file, region: str | None, show_metrics: bool) -> None:
    """Run RESOURCE with the properties in PROPERTIES_FILE and print the result.

    The file holds the resource properties as a JSON object. An optional
    RequestType key (Create, Update or Delete; default Create) selects the
    operation. No response is sent to CloudFormation.
    """
    configure_logging()
    init_metrics()

    try:
        properties = json.load(properties_file)
    except json.JSONDecodeError as e:
        raise click.ClickException(f"Invalid JSON: {e}") from e
    if not isinstance(properties, dict):
        raise click.ClickException("The properties file must contain a JSON object.")

    try:
        request_type = RequestType(properties.pop("RequestType", RequestType.CREATE.value))
    except ValueError as e:
        raise click.ClickException(f"Unknown event RequestType: {e}") from e

    client = AwsClient(region=region)
    set_runtime_info(VERSION, client.region or "")
    handler = get_resource(resource)
    logger.info("%s called directly (%s)", resource, request_type.value)

    try:
        result = handler.run(request_type, properties, client)
    except CustomResourceError as e:
        raise click.ClickException(str(e)) from e

    click.echo(json.dumps(result, indent=2, default=str))
    if show_metrics:
        click.echo(generate_latest().decode())


if __name__ == "__main__":
    main()
