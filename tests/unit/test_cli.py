"""Tests for the processed-data command line."""

from __future__ import annotations

from click.testing import CliRunner

from processed_data.cli.main import cli


def test_schema_prints_sdl() -> None:
    result = CliRunner().invoke(cli, ["schema"])

    assert result.exit_code == 0, result.output
    assert "type Datasets" in result.stdout
    assert "processedData" in result.stdout


def test_schema_writes_file(tmp_path) -> None:
    path = tmp_path / "processed_data.graphql"

    result = CliRunner().invoke(cli, ["schema", "--path", str(path)])

    assert result.exit_code == 0, result.output
    sdl = path.read_text(encoding="utf-8")
    assert "type Datasets" in sdl
    assert '@key(fields: "id", resolvable: false)' in sdl


def test_serve_passes_settings_to_uvicorn(monkeypatch) -> None:
    calls = []
    monkeypatch.setattr("uvicorn.run", lambda *args, **kwargs: calls.append((args, kwargs)))
    monkeypatch.setenv("PORT", "8081")

    result = CliRunner().invoke(cli, ["serve", "--host", "127.0.0.1"])

    assert result.exit_code == 0, result.output
    (args, kwargs), = calls
    assert args == ("processed_data.app.main:create_app",)
    assert kwargs["factory"] is True
    assert kwargs["host"] == "127.0.0.1"
    assert kwargs["port"] == 8081
