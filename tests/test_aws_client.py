"""Tests for the AWS SDK wrapper."""

import pytest
from botocore.exceptions import EndpointConnectionError

from aws_client import AwsClient, api_call
from models import ProviderError

from conftest import FakeService, client_error


class TestApiCall:
    def test_translates_client_error(self):
        @api_call("kms")
        def list_aliases():
            raise client_error("AccessDeniedException", "ListAliases", "not allowed")

        with pytest.raises(ProviderError) as excinfo:
            list_aliases()

        assert excinfo.value.code == "AccessDeniedException"
        assert "not allowed" in str(excinfo.value)
        assert excinfo.value.__cause__ is not None

    def test_translates_botocore_error(self):
        @api_call("ec2")
        def describe_vpcs():
            raise EndpointConnectionError(endpoint_url="https://ec2.example")

        with pytest.raises(ProviderError) as excinfo:
            describe_vpcs()

        assert excinfo.value.code == "BotoCoreError"

    def test_does_not_retry(self):
        calls = []

        @api_call("kms")
        def delete_alias():
            calls.append(1)
            raise client_error("Throttling")

        with pytest.raises(ProviderError):
            delete_alias()
        assert len(calls) == 1

    def test_passes_result_through(self):
        @api_call("kms")
        def get():
            return {"ok": True}

        assert get() == {"ok": True}


class TestAwsClient:
    def test_region_from_environment(self, monkeypatch):
        monkeypatch.setenv("AWS_REGION", "us-west-2")

        assert AwsClient().region == "us-west-2"

    def test_explicit_region_wins(self, monkeypatch):
        monkeypatch.setenv("AWS_REGION", "us-west-2")

        assert AwsClient(region="eu-north-1").region == "eu-north-1"

    def test_service_clients_created_once(self):
        created = []

        def factory(name):
            created.append(name)
            return FakeService(list_aliases={"Aliases": []})

        client = AwsClient(region="eu-west-1", client_factory=factory)
        client.list_aliases()
        client.list_aliases()

        assert created == ["kms"]

    def test_paginated_listing_collects_all_pages(self, services, client):
        services["route53"] = FakeService(
            list_hosted_zones=[
                {"HostedZones": [{"Id": "/hostedzone/Z1"}]},
                {"HostedZones": [{"Id": "/hostedzone/Z2"}]},
            ]
        )

        zones = client.list_hosted_zones()

        assert [z["Id"] for z in zones] == ["/hostedzone/Z1", "/hostedzone/Z2"]

    def test_associate_includes_comment_when_given(self, services, client):
        services["route53"] = FakeService(
            associate_vpc_with_hosted_zone={"ChangeInfo": {"Id": "/change/C1"}}
        )

        change_id = client.associate_vpc_with_hosted_zone("Z1", "vpc-1", "eu-west-1", "hello")

        assert change_id == "/change/C1"
        assert services["route53"].called("associate_vpc_with_hosted_zone") == [
            {
                "HostedZoneId": "Z1",
                "VPC": {"VPCId": "vpc-1", "VPCRegion": "eu-west-1"},
                "Comment": "hello",
            }
        ]

    def test_provider_error_from_service(self, services, client):
        services["cloudformation"] = FakeService(
            describe_stacks=client_error("ValidationError", "DescribeStacks", "Stack x does not exist")
        )

        with pytest.raises(ProviderError) as excinfo:
            client.describe_stacks("x")

        assert excinfo.value.code == "ValidationError"
