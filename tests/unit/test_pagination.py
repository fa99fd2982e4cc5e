"""
Tests unitarios para PaginationWalker.

Verifica las condiciones de corte: página vacía, next_page null y fallo de
transporte (que queda registrado en `failure`).
"""
from __future__ import annotations

from typing import Any

import pytest

from app.infrastructure.external.casafari_sync.errors import CasafariApiError
from app.infrastructure.external.casafari_sync.pagination import PaginationWalker


class _FakeFetch:
    """fetch_page falso: responde por número de página y registra las llamadas."""

    def __init__(self, pages: dict[int, Any]) -> None:
        self._pages = pages
        self.calls: list[tuple[dict, int, int]] = []

    def __call__(self, filters: dict, page: int, per_page: int) -> dict:
        self.calls.append((filters, page, per_page))
        response = self._pages.get(page, {"data": []})
        if isinstance(response, Exception):
            raise response
        return response

    @property
    def pages(self) -> list[int]:
        return [page for _, page, _ in self.calls]


def test_stops_on_empty_page() -> None:
    fetch = _FakeFetch({
        1: {"data": [{"id": "1"}, {"id": "2"}], "pagination": {"next_page": 2}},
        2: {"data": [], "pagination": {"next_page": 3}},
    })
    walker = PaginationWalker(fetch, {"country": "PT"}, per_page=2)

    batches = list(walker)

    assert batches == [[{"id": "1"}, {"id": "2"}]]
    assert fetch.pages == [1, 2]
    assert walker.failure is None
    assert walker.pages_fetched == 2


def test_stops_when_next_page_is_null() -> None:
    fetch = _FakeFetch({
        1: {"data": [{"id": "1"}], "pagination": {"next_page": 2}},
        2: {"data": [{"id": "2"}], "pagination": {"next_page": None}},
        3: {"data": [{"id": "never"}]},
    })

    batches = list(PaginationWalker(fetch))

    assert batches == [[{"id": "1"}], [{"id": "2"}]]
    assert fetch.pages == [1, 2]


def test_stops_when_pagination_is_missing() -> None:
    fetch = _FakeFetch({1: {"data": [{"id": "1"}]}, 2: {"data": [{"id": "2"}]}})

    assert list(PaginationWalker(fetch)) == [[{"id": "1"}]]
    assert fetch.pages == [1]


def test_passes_filters_and_per_page() -> None:
    fetch = _FakeFetch({1: {"data": []}})

    list(PaginationWalker(fetch, {"city": "Lisboa", "type": "apartment"}, per_page=50))

    assert fetch.calls == [({"city": "Lisboa", "type": "apartment"}, 1, 50)]


def test_records_failure_and_stops() -> None:
    fetch = _FakeFetch({
        1: {"data": [{"id": "1"}], "pagination": {"next_page": 2}},
        2: CasafariApiError("Casafari respondió 500", status_code=500),
    })
    walker = PaginationWalker(fetch)

    batches = list(walker)

    assert batches == [[{"id": "1"}]]
    assert isinstance(walker.failure, CasafariApiError)
    assert walker.failure.status_code == 500
    assert walker.pages_fetched == 1


def test_failure_on_first_page_yields_nothing() -> None:
    fetch = _FakeFetch({1: CasafariApiError("timeout")})
    walker = PaginationWalker(fetch)

    assert list(walker) == []
    assert walker.failure is not None


def test_each_iteration_restarts_from_page_one() -> None:
    fetch = _FakeFetch({1: {"data": [{"id": "1"}], "pagination": {"next_page": None}}})
    walker = PaginationWalker(fetch)

    list(walker)
    list(walker)

    assert fetch.pages == [1, 1]


@pytest.mark.parametrize(
    "bad_page",
    [
        {"data": 5},
        {"data": {"id": "1"}},
        {"data": [{"id": "1"}], "pagination": ["x"]},
        {"data": [{"id": "1"}], "pagination": "next"},
        ["not", "an", "object"],
    ],
)
def test_malformed_page_is_recorded_as_failure(bad_page) -> None:
    fetch = _FakeFetch({1: bad_page})
    walker = PaginationWalker(fetch)

    batches = list(walker)

    assert batches == []
    assert isinstance(walker.failure, CasafariApiError)
    assert fetch.pages == [1]


def test_malformed_page_after_good_ones_keeps_earlier_batches() -> None:
    fetch = _FakeFetch({
        1: {"data": [{"id": "1"}], "pagination": {"next_page": 2}},
        2: {"data": "oops", "pagination": {"next_page": 3}},
    })
    walker = PaginationWalker(fetch)

    assert list(walker) == [[{"id": "1"}]]
    assert walker.failure is not None
    assert fetch.pages == [1, 2]


def test_page_without_data_ends_even_with_next_page() -> None:
    fetch = _FakeFetch({1: {"pagination": {"next_page": 2}}, 2: {"data": [{"id": "never"}]}})
    walker = PaginationWalker(fetch)

    assert list(walker) == []
    assert walker.failure is None
    assert fetch.pages == [1]
