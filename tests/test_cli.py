"""Tests for the local runner."""

import json

import pytest
from click.testing import CliRunner

import cli
from aws_client import AwsClient

from conftest import FakeService

STACK = {
    "StackName": "network",
    "StackStatus": "CREATE_COMPLETE",
    "Outputs": [{"OutputKey": "VpcId", "OutputValue": "vpc-1"}],
}


@pytest.fixture
def runner(monkeypatch, services):
    services["cloudformation"] = FakeService(describe_stacks={"Stacks": [STACK]})
    monkeypatch.setattr(cli, "configure_logging", lambda: None)
    monkeypatch.setattr(
        cli,
        "AwsClient",
        lambda region=None: AwsClient(
            region=region or "eu-west-1", client_factory=lambda name: services[name]
        ),
    )
    return CliRunner()


def write_properties(tmp_path, properties):
    path = tmp_path / "properties.json"
    path.write_text(json.dumps(properties) if not isinstance(properties, str) else properties)
    return str(path)


class TestMain:
    def test_runs_lookup(self, runner, services, tmp_path):
        path = write_properties(tmp_path, {"StackName": "network"})

        result = runner.invoke(cli.main, ["getStackOutputs", path])

        assert result.exit_code == 0, result.output
        assert json.loads(result.output) == {"VpcId": "vpc-1"}
        assert services["cloudformation"].called("describe_stacks") == [{"StackName": "network"}]

    def test_delete_of_lookup_is_noop(self, runner, services, tmp_path):
        path = write_properties(tmp_path, {"StackName": "network", "RequestType": "Delete"})

        result = runner.invoke(cli.main, ["getStackOutputs", path])

        assert result.exit_code == 0, result.output
        assert json.loads(result.output) == {}
        assert services["cloudformation"].calls == []

    def test_prints_metrics(self, runner, tmp_path):
        path = write_properties(tmp_path, {"StackName": "network"})

        result = runner.invoke(cli.main, ["getStackOutputs", path, "--metrics"])

        assert result.exit_code == 0, result.output
        assert "custom_resource_runtime_info" in result.output

    def test_handler_error(self, runner, services, tmp_path):
        services["cloudformation"] = FakeService(describe_stacks={"Stacks": []})
        path = write_properties(tmp_path, {"StackName": "other"})

        result = runner.invoke(cli.main, ["getStackOutputs", path])

        assert result.exit_code == 1
        assert "Matching Stack could not be found." in result.output

    def test_invalid_json(self, runner, tmp_path):
        path = write_properties(tmp_path, "{not json")

        result = runner.invoke(cli.main, ["getStackOutputs", path])

        assert result.exit_code == 1
        assert "Invalid JSON" in result.output

    def test_unknown_request_type(self, runner, tmp_path):
        path = write_properties(tmp_path, {"StackName": "network", "RequestType": "Replace"})

        result = runner.invoke(cli.main, ["getStackOutputs", path])

        assert result.exit_code == 1
        assert "Unknown event RequestType" in result.output

    def test_unknown_resource(self, runner, tmp_path):
        path = write_properties(tmp_path, {})

        result = runner.invoke(cli.main, ["getNothing", path])

        assert result.exit_code == 2
