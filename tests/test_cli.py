import json

import pytest
from click.testing import CliRunner

from cjdnsadmin.admin.dummy_peer import sample_routing_table
from cjdnsadmin.cli.main import cli

FAR = "fc38:4c2c:1a8f:3981:f2e7:c2b9:6870:6e84"


@pytest.fixture
def run(tmp_path):
    runner = CliRunner()

    def invoke(*args, env=None):
        environment = {"HOME": str(tmp_path), "CJDNS_ADMIN_PASSWORD": None}
        environment.update(env or {})
        return runner.invoke(cli, ["--dummy", *args], env=environment)

    return invoke


def test_ping(run):
    result = run("ping")
    assert result.exit_code == 0, result.output
    assert result.output.strip() == "pong"


def test_memory_with_password(run):
    result = run("--password", "pw", "memory")
    assert result.exit_code == 0, result.output
    assert "1,048,576 bytes" in result.output


def test_password_from_environment(run):
    result = run("memory", env={"CJDNS_ADMIN_PASSWORD": "pw"})
    assert result.exit_code == 0, result.output


def test_config_file(run, tmp_path):
    path = tmp_path / "admin.json"
    path.write_text(json.dumps({"addr": "127.0.0.1", "port": 11234, "password": "pw"}))

    result = run("--config", str(path), "ping")
    assert result.exit_code == 0, result.output


def test_broken_config_file(run, tmp_path):
    path = tmp_path / "admin.json"
    path.write_text("{not json")

    result = run("--config", str(path), "ping")
    assert result.exit_code != 0
    assert "Failed to read config" in result.output


def test_dump_json(run):
    result = run("dump", "--format", "json")
    assert result.exit_code == 0, result.output
    assert json.loads(result.output) == sample_routing_table()


def test_dump_table(run):
    result = run("dump")
    assert result.exit_code == 0, result.output
    assert "6 routes" in result.output


def test_routes_json(run):
    result = run("routes", "--target", FAR, "--format", "json")
    assert result.exit_code == 0, result.output

    chains = json.loads(result.output)[FAR]
    assert [[hop["path"] for hop in chain] for chain in chains] == [
        ["1", "10011", "101010011"],
        ["1", "10101", "101010101"],
    ]


def test_routes_table_max_hops(run):
    result = run("routes", "--max-hops", "1")
    assert result.exit_code == 0, result.output
    assert FAR not in result.output
    assert "1 hops: 1 -> 10011" in result.output


def test_routes_bad_target(run):
    result = run("routes", "--target", "nope")
    assert result.exit_code != 0
    assert "not an IPv6 address" in result.output


def test_hosts(run):
    result = run("hosts")
    assert result.exit_code == 0, result.output
    assert "4 hosts" in result.output


def test_hosts_with_cjdns_ping(run):
    result = run("hosts", "--max-hops", "1", "--ping", "cjdns")
    assert result.exit_code == 0, result.output
    assert result.output.count(" ms") == 3


def test_connect_failure_is_reported(tmp_path):
    result = CliRunner().invoke(cli, ["--port", "1", "--timeout", "0.5", "ping"],
                                env={"HOME": str(tmp_path)})
    assert result.exit_code != 0
    assert "Error" in result.output
