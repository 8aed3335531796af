import json

import pytest
from click.testing import CliRunner
from unittest.mock import patch, MagicMock

from davrelay.cli import main
from davrelay.client import DavResponse


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep the developer's DAV_* variables out of the tests."""
    for name in ("DAV_SERVER_URL", "DAV_USERNAME", "DAV_PASSWORD",
                 "DAV_PROPERTY_PRESETS_DIR", "DAV_PROPERTY_PRESETS_TTL_MS"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def presets_dir(tmp_path):
    directory = tmp_path / "property-presets"
    directory.mkdir()
    (directory / "m.json").write_text(json.dumps({
        "name": "m",
        "description": "Just the type",
        "properties": [{"namespace": "DAV:", "name": "resourcetype"}],
    }))
    return directory


@pytest.fixture
def runner():
    return CliRunner()


def test_presets_list(runner, presets_dir):
    result = runner.invoke(main, ['--presets-dir', str(presets_dir), 'presets', 'list'])
    assert result.exit_code == 0
    assert "basic" in result.output
    assert "m" in result.output
    assert "(user) Just the type" in result.output


def test_presets_list_json(runner, presets_dir):
    result = runner.invoke(main, ['--presets-dir', str(presets_dir), 'presets', 'list', '--json'])
    assert result.exit_code == 0
    names = [p["name"] for p in json.loads(result.output)["presets"]]
    assert names == ["basic", "detailed", "minimal", "m"]


def test_presets_show(runner, presets_dir):
    result = runner.invoke(main, ['--presets-dir', str(presets_dir), 'presets', 'show', 'm'])
    assert result.exit_code == 0
    assert json.loads(result.output)["properties"] == [{"namespace": "DAV:", "name": "resourcetype"}]


def test_presets_show_unknown(runner, presets_dir):
    result = runner.invoke(main, ['--presets-dir', str(presets_dir), 'presets', 'show', 'ghost'])
    assert result.exit_code == 1
    assert "Preset 'ghost' not found" in result.output
    assert "minimal" in result.output


def test_presets_body_with_extra_property(runner, presets_dir):
    result = runner.invoke(main, [
        '--presets-dir', str(presets_dir), 'presets', 'body', 'm',
        '--property', 'http://owncloud.org/ns', 'fileid',
        '--property', 'DAV:', 'bad name',
    ])
    assert result.exit_code == 0
    assert "<D:resourcetype/>" in result.output
    assert "<N0:fileid/>" in result.output
    assert "Skipping invalid property" in result.output


def test_env_var_presets_dir(runner, presets_dir, monkeypatch):
    monkeypatch.setenv("DAV_PROPERTY_PRESETS_DIR", str(presets_dir))
    result = runner.invoke(main, ['presets', 'show', 'm'])
    assert result.exit_code == 0


def test_invalid_ttl_env(runner, monkeypatch):
    monkeypatch.setenv("DAV_PROPERTY_PRESETS_TTL_MS", "soon")
    result = runner.invoke(main, ['presets', 'list'])
    assert result.exit_code == 1
    assert "Configuration error" in result.output


def test_request_without_server(runner, presets_dir):
    result = runner.invoke(main, ['--presets-dir', str(presets_dir), 'request', 'GET', 'a.txt'])
    assert result.exit_code == 1
    assert "DAV_SERVER_URL" in result.output


def test_request_with_preset(runner, presets_dir, monkeypatch):
    monkeypatch.setenv("DAV_SERVER_URL", "http://localhost:8080/dav/")
    client = MagicMock()
    client.request.return_value = DavResponse(207, "Multi-Status", {}, "<ok/>")
    with patch("davrelay.tools.DavClient.from_settings", return_value=client):
        result = runner.invoke(main, [
            '--presets-dir', str(presets_dir), 'request', 'propfind', 'files/',
            '--preset', 'm', '--depth', '0', '--header', 'X-Trace: abc',
        ])
    assert result.exit_code == 0
    payload = json.loads(result.output)
    assert payload["status"] == 207
    assert payload["usedPreset"] == "m"
    args, kwargs = client.request.call_args
    assert args == ("PROPFIND", "files/")
    assert kwargs["headers"] == {"X-Trace": "abc"}
    assert "<D:resourcetype/>" in kwargs["body"]


def test_request_bad_header(runner, presets_dir):
    result = runner.invoke(main, ['--presets-dir', str(presets_dir), 'request', 'GET', 'a', '--header', 'nocolon'])
    assert result.exit_code != 0
    assert "Name: value" in result.output


@patch("davrelay.cli.serve")
def test_serve(mock_serve, runner, presets_dir):
    result = runner.invoke(main, ['--presets-dir', str(presets_dir), 'serve'])
    assert result.exit_code == 0
    mock_serve.assert_called_once()
    [tools] = mock_serve.call_args.args
    assert "m" in tools.registry.names()


@patch("davrelay.cli.serve", side_effect=KeyboardInterrupt)
def test_serve_interrupted(mock_serve, runner, presets_dir):
    result = runner.invoke(main, ['--presets-dir', str(presets_dir), 'serve'])
    assert result.exit_code == 0
