"""Tests for the configured Strawberry extensions."""

from __future__ import annotations

import warnings

from strawberry.extensions import MaskErrors, QueryDepthLimiter, SchemaExtension

from processed_data.features.graphql.extensions import (
    GraphQLMetricsExtension,
    GraphQLTracingExtension,
    get_extensions,
)
from processed_data.features.graphql.schema import create_schema


def test_extensions_are_classes_or_factories() -> None:
    extensions = get_extensions()

    assert not any(isinstance(extension, SchemaExtension) for extension in extensions)
    built = [extension() for extension in extensions]
    assert all(isinstance(extension, SchemaExtension) for extension in built)
    assert [type(extension) for extension in built] == [
        QueryDepthLimiter,
        GraphQLTracingExtension,
        GraphQLMetricsExtension,
    ]


def test_errors_masked_in_production(monkeypatch) -> None:
    monkeypatch.setenv("APP_ENVIRONMENT", "production")

    built = [extension() for extension in get_extensions()]

    assert isinstance(built[-1], MaskErrors)
    assert not any(isinstance(extension, SchemaExtension) for extension in get_extensions())


def test_errors_not_masked_in_tests() -> None:
    built = [extension() for extension in get_extensions()]

    assert not any(isinstance(extension, MaskErrors) for extension in built)


def test_schema_builds_without_extension_deprecations() -> None:
    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always")
        create_schema()

    assert not [w for w in caught if "extension" in str(w.message).lower()]
