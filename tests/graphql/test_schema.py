"""Tests for the exported subgraph schema."""

from __future__ import annotations

import pytest

from processed_data.features.graphql.schema import export_sdl, schema


def test_schema_has_query_type() -> None:
    """Test that the schema has a Query type."""
    assert schema.query is not None


def test_schema_is_query_only() -> None:
    """Test that the subgraph exposes no mutations or subscriptions."""
    assert schema.mutation is None
    assert schema.subscription is None


def test_datasets_is_an_entity() -> None:
    """Test that Datasets is keyed on id and resolvable here."""
    sdl = export_sdl()
    assert 'type Datasets @key(fields: "id")' in sdl


def test_data_processing_key_is_not_resolvable() -> None:
    """Test that DataProcessing is declared with an unresolvable key."""
    sdl = export_sdl()
    assert 'type DataProcessing @key(fields: "id", resolvable: false)' in sdl


def test_stored_path_is_not_exposed() -> None:
    """Test that the raw file path stays internal."""
    sdl = export_sdl()
    assert "fileFullPath" not in sdl
    assert "downloadUrl" in sdl


def test_statistics_type_enum() -> None:
    """Test the resolution shell enum values."""
    sdl = export_sdl()
    assert "enum StatisticsType" in sdl
    for value in ("OVERALL", "INNER_SHELL", "OUTER_SHELL"):
        assert value in sdl


def test_export_writes_file(tmp_path) -> None:
    """Test that the SDL is written with a trailing newline."""
    path = tmp_path / "schema.graphql"

    sdl = export_sdl(path)

    assert path.read_text(encoding="utf-8") == sdl + "\n"


@pytest.mark.asyncio
async def test_service_sdl_query() -> None:
    """Test that the gateway can fetch the SDL through ``_service``."""
    result = await schema.execute("{ _service { sdl } }")

    assert result.errors is None
    sdl = result.data["_service"]["sdl"]
    assert "Datasets" in sdl
    assert "@key" in sdl


def test_schema_links_federation_v2() -> None:
    """Test that the subgraph is composed as a Federation 2 subgraph."""
    sdl = export_sdl()
    assert "specs.apollo.dev/federation/v2" in sdl
