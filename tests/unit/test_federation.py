"""Tests for entity reference resolution."""

from __future__ import annotations

import pytest

from processed_data.core.exceptions import ReferenceResolutionError
from processed_data.features.graphql.resolvers.federation import resolve_entity_reference
from processed_data.features.graphql.types import DataCollection


def test_builds_stub_from_key() -> None:
    entity = resolve_entity_reference("Datasets", {"id": 42})

    assert isinstance(entity, DataCollection)
    assert entity.id == 42


def test_accepts_string_form_of_integer_key() -> None:
    assert resolve_entity_reference("Datasets", {"id": "7"}).id == 7


def test_resolve_reference_classmethod_delegates() -> None:
    assert DataCollection.resolve_reference(id=3).id == 3


@pytest.mark.parametrize(
    "representation",
    [{}, {"id": "abc"}, {"id": None}, {"id": True}, {"id": 1.5}],
)
def test_malformed_representation_is_rejected(representation: dict) -> None:
    with pytest.raises(ReferenceResolutionError) as exc_info:
        resolve_entity_reference("Datasets", representation)

    assert exc_info.value.type_name == "Datasets"
    assert exc_info.value.status_code == 400


def test_unknown_type_is_rejected() -> None:
    with pytest.raises(ReferenceResolutionError, match="not resolvable"):
        resolve_entity_reference("DataProcessing", {"id": 1})


@pytest.mark.parametrize("value", [" 7 ", "1_000", "٣", "-5", "+5", "", -5])
def test_only_plain_decimal_ids_are_accepted(value) -> None:
    with pytest.raises(ReferenceResolutionError, match="non-negative integer"):
        resolve_entity_reference("Datasets", {"id": value})


def test_zero_is_a_valid_id() -> None:
    assert resolve_entity_reference("Datasets", {"id": "0"}).id == 0
    assert resolve_entity_reference("Datasets", {"id": 0}).id == 0
