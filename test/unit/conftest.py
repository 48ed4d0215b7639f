"""Test fixtures for robyn-safehttp unit tests."""

from dataclasses import dataclass, field

import pytest

from safehttp.models.form import Form


# -----------------------------------------------------------------------------
# Mock classes for Robyn Request
# -----------------------------------------------------------------------------


@dataclass
class MockQueryParams:
    """Mock QueryParams object for Robyn Request."""

    _data: dict[str, list[str]] = field(default_factory=dict)

    def get(self, key: str, default: str | None = None) -> str | None:
        values = self._data.get(key)
        return values[0] if values else default

    def to_dict(self) -> dict[str, list[str]]:
        return {key: list(values) for key, values in self._data.items()}


@dataclass
class MockRequest:
    """Mock Request object for Robyn."""

    method: str = "GET"
    path: str = "/"
    query_params: MockQueryParams = field(default_factory=MockQueryParams)
    form_data: dict[str, str] = field(default_factory=dict)
    files: dict[str, bytes] = field(default_factory=dict)


# -----------------------------------------------------------------------------
# Request fixtures
# -----------------------------------------------------------------------------


@pytest.fixture
def make_mock_request():
    """Factory fixture to create mock requests."""

    def _make(
        method: str = "GET",
        query: dict[str, list[str]] | None = None,
        form_data: dict[str, str] | None = None,
        files: dict[str, bytes] | None = None,
    ) -> MockRequest:
        return MockRequest(
            method=method,
            query_params=MockQueryParams(query or {}),
            form_data=form_data or {},
            files=files or {},
        )

    return _make


@pytest.fixture
def make_form():
    """Factory fixture to create forms from a key -> values mapping."""

    def _make(**values: list[str]) -> Form:
        return Form(values)

    return _make
