"""
Name: Optional Enrichment Tests

Responsibilities:
  - Validate that lookup failures are captured as values
"""

import pytest

from worknest.application.enrichment import enrich

pytestmark = pytest.mark.unit


def test_successful_lookup():
    result = enrich("grantor", lambda x: x * 2, 21)

    assert result.ok is True
    assert result.or_none() == 42


def test_failing_lookup_maps_to_none():
    def explode(_):
        raise ConnectionError("store unavailable")

    result = enrich("grantor", explode, "id")

    assert result.ok is False
    assert isinstance(result.error, ConnectionError)
    assert result.or_none() is None


def test_missing_value_is_not_an_error():
    result = enrich("grantor", lambda _: None, "id")

    assert result.ok is True
    assert result.or_none() is None
