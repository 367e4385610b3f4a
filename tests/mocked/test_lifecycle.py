import os
from pathlib import Path
from unittest import mock

import pytest

from domain_fixtures import lifecycle
from domain_fixtures.cloud_adapters.serverless_adapter import ServerlessCLI
from domain_fixtures.context import GatewayHandles, RunContext
from domain_fixtures.errors import CommandError
from domain_fixtures.lifecycle import FixtureRunner


@pytest.fixture
def run_command():
    with mock.patch("domain_fixtures.cloud_adapters.serverless_adapter.run_command") as patched:
        yield patched


def _subcommands(mock_run):
    return [c[0][0][1] for c in mock_run.call_args_list]


def test_end_to_end_basic_fixture(project_root, run_command):
    expected = Path.home() / "tmp" / "domain-manager-test-abc123"

    outcome = lifecycle.provision("basic", "test.example.com", "abc123")

    assert outcome.ok
    assert outcome.workspace == expected
    assert expected.is_dir()
    assert (expected / "serverless.yml").is_file()
    assert _subcommands(run_command) == ["create_domain", "deploy"]
    for call in run_command.call_args_list:
        assert call.kwargs["cwd"] == str(expected)
        assert call[0][0][2:] == ["--RANDOM_STRING", "abc123"]

    run_command.reset_mock()
    outcome = lifecycle.deprovision("test.example.com", "abc123")

    assert outcome.ok
    assert _subcommands(run_command) == ["remove", "delete_domain"]
    assert not expected.exists()


def test_provision_failure_is_reported_not_raised(project_root, run_command):
    run_command.side_effect = [None, CommandError(["sls", "deploy"], 1, "")]

    outcome = lifecycle.provision("basic", "test.example.com", "abc123")

    assert not outcome
    assert outcome.step == "deploy"
    assert isinstance(outcome.error, CommandError)
    assert _subcommands(run_command) == ["create_domain", "deploy"]


def test_provision_missing_fixture_stops_before_tool(project_root, run_command):
    outcome = lifecycle.provision("nope", "test.example.com", "abc123")
    assert outcome.step == "create_workspace"
    run_command.assert_not_called()


def test_provision_swallows_unexpected_errors(project_root):
    cli = mock.create_autospec(ServerlessCLI, instance=True)
    cli.create_domain.side_effect = RuntimeError("unexpected")
    outcome = lifecycle.provision("basic", "test.example.com", "abc123", cli=cli)
    assert outcome.ok is False
    assert outcome.step == "create_domain"
    cli.deploy.assert_not_called()


def test_deprovision_failure_leaves_workspace(project_root, run_command):
    lifecycle.provision("basic", "test.example.com", "abc123")
    run_command.reset_mock()
    run_command.side_effect = CommandError(["sls", "remove"], 1, "Stack does not exist")

    outcome = lifecycle.deprovision("test.example.com", "abc123")

    assert not outcome
    assert outcome.step == "remove"
    assert _subcommands(run_command) == ["remove"]
    assert outcome.workspace.exists()
    assert outcome.to_dict()["error"].startswith("Command failed with code 1")


def test_deprovision_without_workspace_still_resolves(run_command):
    run_command.side_effect = CommandError(["sls", "remove"], None, "No such file or directory")
    outcome = lifecycle.deprovision("test.example.com", "never-provisioned")
    assert outcome.ok is False


def test_gateway_handles_are_passed_per_run(project_root, run_command):
    gw_a = GatewayHandles("api-a", "res-a")
    FixtureRunner(RunContext.create("run-a", gw_a)).provision("basic", "a.example.com")
    FixtureRunner(RunContext.create("run-b")).provision("basic", "b.example.com")

    envs = {c[0][0][3]: c.kwargs["env"] for c in run_command.call_args_list}
    assert envs["run-a"] == {"REST_API_ID": "api-a", "RESOURCE_ID": "res-a"}
    assert envs["run-b"] == {}
    assert "REST_API_ID" not in os.environ

    cwds = {c.kwargs["cwd"] for c in run_command.call_args_list}
    assert len(cwds) == 2


@pytest.mark.parametrize("run_id", ["", "../.."])
def test_invalid_run_id_fails_without_touching_anything(project_root, run_command, run_id):
    other = lifecycle.provision("basic", "other.example.com", "other-run").workspace
    run_command.reset_mock()

    provisioned = lifecycle.provision("basic", "test.example.com", run_id)
    removed = lifecycle.deprovision("test.example.com", run_id)

    for outcome in (provisioned, removed):
        assert outcome.ok is False
        assert outcome.step == "run_context"
        assert outcome.workspace is None
        assert outcome.to_dict()["workspace"] is None
    run_command.assert_not_called()
    assert other.is_dir()
