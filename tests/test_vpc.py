"""Tests for the VPC lookup."""

import pytest

from models import AmbiguousError, NotFoundError, ValidationError
from resources.vpc import find_vpc, subnet_filters

from conftest import FakeService


def vpc(vpc_id, name=None, default=False):
    record = {
        "VpcId": vpc_id,
        "CidrBlock": "10.0.0.0/16",
        "DhcpOptionsId": "dopt-1",
        "OwnerId": "123456789012",
        "State": "available",
        "IsDefault": default,
        "InstanceTenancy": "default",
        "CidrBlockAssociationSet": [
            {"AssociationId": f"{vpc_id}-cidr", "CidrBlock": "10.0.0.0/16"}
        ],
        "Tags": [],
    }
    if name:
        record["Tags"] = [{"Key": "Name", "Value": name}, {"Key": "Type", "Value": "app"}]
    return record


SUBNETS = [
    {"SubnetId": "subnet-1", "CidrBlock": "10.0.1.0/24"},
    {"SubnetId": "subnet-2", "CidrBlock": "10.0.2.0/24"},
]


@pytest.fixture
def ec2(services):
    services["ec2"] = FakeService(
        describe_vpcs=[
            {"Vpcs": [vpc("vpc-default", default=True), vpc("vpc-app", "app")]},
            {"Vpcs": [vpc("vpc-dup1", "shared"), vpc("vpc-dup2", "shared")]},
        ],
        describe_subnets=[{"Subnets": SUBNETS}],
    )
    return services["ec2"]


class TestSubnetFilters:
    def test_base_filters(self):
        assert subnet_filters("vpc-1") == [
            {"Name": "state", "Values": ["available"]},
            {"Name": "vpc-id", "Values": ["vpc-1"]},
        ]

    def test_optional_filters(self):
        filters = subnet_filters("vpc-1", only_default=True, only_private=True)

        assert {"Name": "default-for-az", "Values": ["true"]} in filters
        assert {"Name": "tag:Type", "Values": ["Private"]} in filters


class TestFindVpc:
    def test_by_name_tag(self, ec2, client):
        result = find_vpc({"VpcName": "app"}, client)

        assert result == {
            "VpcId": "vpc-app",
            "CidrBlock": "10.0.0.0/16",
            "DhcpOptionsId": "dopt-1",
            "OwnerId": "123456789012",
            "CidrBlockAssociationSet": [
                {"AssociationId": "vpc-app-cidr", "CidrBlock": "10.0.0.0/16"}
            ],
            "Subnets": ["subnet-1", "subnet-2"],
            "SubnetIds": "subnet-1,subnet-2",
            "CidrBlocks": ["10.0.1.0/24", "10.0.2.0/24"],
        }

    def test_default_vpc(self, ec2, client):
        assert find_vpc({"VpcName": "default"}, client)["VpcId"] == "vpc-default"

    def test_subnet_filters_passed(self, ec2, client):
        find_vpc({"VpcName": "app", "OnlyPublicSubnets": "true"}, client)

        filters = ec2.called("describe_subnets")[0]["Filters"]
        assert {"Name": "vpc-id", "Values": ["vpc-app"]} in filters
        assert {"Name": "tag:Type", "Values": ["Public"]} in filters

    def test_available_vpcs_only(self, ec2, client):
        find_vpc({"VpcName": "app"}, client)

        assert ec2.called("describe_vpcs")[0]["Filters"] == [
            {"Name": "state", "Values": ["available"]}
        ]

    def test_unknown_name(self, ec2, client):
        with pytest.raises(NotFoundError, match="Matching VPC could not be found"):
            find_vpc({"VpcName": "nope"}, client)

    def test_duplicate_name(self, ec2, client):
        with pytest.raises(AmbiguousError):
            find_vpc({"VpcName": "shared"}, client)

    def test_public_and_private_exclusive(self, ec2, client):
        with pytest.raises(ValidationError, match="mutually exclusive"):
            find_vpc({"VpcName": "app", "OnlyPublicSubnets": True, "OnlyPrivateSubnets": True}, client)

    def test_rejects_non_boolean_flag(self, ec2, client):
        with pytest.raises(ValidationError, match="OnlyDefaultSubnets"):
            find_vpc({"VpcName": "app", "OnlyDefaultSubnets": "sometimes"}, client)
