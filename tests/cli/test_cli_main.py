"""CLI tests (Typer CliRunner, HTTP faked with httpx.MockTransport)."""

from __future__ import annotations

import json

import httpx
import pytest
from typer.testing import CliRunner

from adapters.http_client import HttpxTransport
from cli import doctor
from cli import main as cli_main
from fakes import SIGNATURE_DIGEST, SUBJECT_DIGEST, referrers_body

runner = CliRunner()

REFERENCE = f"registry.example.com/acme/app@{SUBJECT_DIGEST}"


@pytest.fixture(autouse=True)
def _isolated_env(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    for name in ("REFSCOUT_MIRRORS", "REFSCOUT_REGISTRY_TOKEN", "REFSCOUT_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("REFSCOUT_HTTP_RETRIES", "0")


@pytest.fixture
def registry(monkeypatch):
    """Install a fake registry; returns the list of received requests."""

    seen: list[httpx.Request] = []
    routes: dict[str, httpx.Response] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return routes.get(request.url.host, httpx.Response(500, text="boom"))

    def build_transport(settings):
        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        return HttpxTransport(settings, client=client)

    monkeypatch.setattr(cli_main, "build_transport", build_transport)
    return seen, routes


def test_discover_json(registry):
    seen, routes = registry
    routes["registry.example.com"] = httpx.Response(200, json=referrers_body(SIGNATURE_DIGEST))

    result = runner.invoke(cli_main.app, ["discover", REFERENCE, "-t", "sig", "--json"])

    assert result.exit_code == 0, result.output
    payload = json.loads(result.stdout)
    assert payload["subject"] == SUBJECT_DIGEST
    assert [r["digest"] for r in payload["references"]] == [SIGNATURE_DIGEST]
    assert seen[0].url.params["referenceType"] == "sig"


def test_discover_table_and_output_file(registry, tmp_path):
    _, routes = registry
    routes["registry.example.com"] = httpx.Response(200, json=referrers_body(SIGNATURE_DIGEST))
    out = tmp_path / "out.json"

    result = runner.invoke(cli_main.app, ["discover", REFERENCE, "--output", str(out)])

    assert result.exit_code == 0, result.output
    assert "Referrers" in result.stdout
    assert json.loads(out.read_text(encoding="utf-8"))["references"][0]["digest"] == SIGNATURE_DIGEST


def test_discover_no_referrers(registry):
    _, routes = registry
    routes["registry.example.com"] = httpx.Response(200, json={"references": []})

    result = runner.invoke(cli_main.app, ["discover", REFERENCE])

    assert result.exit_code == 0, result.output
    assert "No referrers found" in result.stdout


def test_discover_digest_option(registry):
    seen, routes = registry
    routes["registry.example.com"] = httpx.Response(200, json={"references": []})

    result = runner.invoke(cli_main.app, ["discover", "registry.example.com/acme/app:v1", "--digest", SUBJECT_DIGEST])

    assert result.exit_code == 0, result.output
    assert f"/manifests/{SUBJECT_DIGEST}/referrers" in seen[0].url.path


def test_discover_mirror_then_registry(registry, monkeypatch):
    seen, routes = registry
    monkeypatch.setenv("REFSCOUT_MIRRORS", '{"registry.example.com": ["https://mirror.example"]}')
    routes["registry.example.com"] = httpx.Response(200, json=referrers_body(SIGNATURE_DIGEST))

    result = runner.invoke(cli_main.app, ["discover", REFERENCE, "--json"])

    assert result.exit_code == 0, result.output
    assert [r.url.host for r in seen] == ["mirror.example", "registry.example.com"]


def test_discover_failure_exit_code(registry):
    result = runner.invoke(cli_main.app, ["discover", REFERENCE])

    assert result.exit_code == 1
    assert "Discovery failed" in result.output
    assert "500" in result.output


def test_invalid_reference_is_usage_error(registry):
    seen, _ = registry

    result = runner.invoke(cli_main.app, ["discover", "alpine"])

    assert result.exit_code == 2
    assert seen == []


def test_missing_digest_is_usage_error(registry):
    seen, _ = registry

    result = runner.invoke(cli_main.app, ["discover", "registry.example.com/acme/app:v1"])

    assert result.exit_code == 2
    assert "'v1'" in result.output
    assert seen == []


def test_doctor_run_checks_each_host(monkeypatch):
    checked = []

    async def fake_check(host, settings):
        checked.append(host.host)
        return True, "HTTP 401"

    monkeypatch.setenv("REFSCOUT_MIRRORS", '{"docker.io": ["https://mirror.gcr.io"]}')
    monkeypatch.setattr(doctor, "_check_host", fake_check)

    result = runner.invoke(cli_main.app, ["doctor", "run", "--registry", "docker.io"])

    assert result.exit_code == 0, result.output
    assert checked == ["mirror.gcr.io", "registry-1.docker.io"]


def test_doctor_setup_persists_values(monkeypatch):
    written = {}

    def fake_write(values):
        written.update(values)
        return "/tmp/refscout/.env"

    monkeypatch.setattr(doctor, "write_user_env_vars", fake_write)

    result = runner.invoke(
        cli_main.app,
        ["doctor", "setup"],
        input="docker.io\nhttps://mirror.gcr.io\ntok\n",
    )

    assert result.exit_code == 0, result.output
    assert json.loads(written["REFSCOUT_MIRRORS"]) == {"docker.io": ["https://mirror.gcr.io"]}
    assert written["REFSCOUT_REGISTRY_TOKEN"] == "tok"
