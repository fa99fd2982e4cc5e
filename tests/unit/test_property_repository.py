"""
Tests unitarios para PropertyRepository.

Cubre el upsert por casafari_id (idempotencia, reemplazo completo, error de
persistencia) y los filtros/scopes que usa la administración.
"""
from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from unittest.mock import patch

import pytest
from sqlalchemy import select
from sqlalchemy.exc import OperationalError

from app.infrastructure.database.models import CasafariPropertyModel
from app.infrastructure.external.casafari_sync.errors import PersistenceError
from app.infrastructure.external.casafari_sync.field_mapper import map_listing_to_row
from app.infrastructure.repositories.property_repository import (
    PropertyRepository,
    scope_active,
    scope_in_city,
    scope_in_price_range,
    scope_of_type,
    scope_trashed,
)

SYNCED_AT = datetime(2025, 11, 5, 12, 0, 0, tzinfo=timezone.utc)


def _row(listing):
    return map_listing_to_row(listing, synced_at=SYNCED_AT)


def _all(db_session):
    return list(db_session.execute(select(CasafariPropertyModel)).scalars().all())


def test_upsert_creates_then_updates(db_session, sample_listing) -> None:
    repo = PropertyRepository(db_session)

    entity, created = repo.upsert("test-id-1", _row(sample_listing))
    assert created is True
    assert entity.id is not None

    sample_listing["price"]["amount"] = 260000
    same, created_again = repo.upsert("test-id-1", _row(sample_listing))

    assert created_again is False
    assert same.id == entity.id
    rows = _all(db_session)
    assert len(rows) == 1
    assert rows[0].price == Decimal("260000.00")


def test_upsert_is_idempotent(db_session, sample_listing) -> None:
    repo = PropertyRepository(db_session)
    row = _row(sample_listing)

    repo.upsert("test-id-1", row)
    repo.upsert("test-id-1", row)
    repo.upsert("test-id-1", row)

    rows = _all(db_session)
    assert len(rows) == 1
    assert rows[0].casafari_id == "test-id-1"
    assert rows[0].city == "Lisbon"


def test_update_is_a_full_replace(db_session, sample_listing) -> None:
    repo = PropertyRepository(db_session)
    repo.upsert("test-id-1", _row(sample_listing))

    repo.upsert("test-id-1", _row({"id": "test-id-1", "type": "house"}))

    entity = repo.find_by_external_id("test-id-1")
    assert entity.property_type == "house"
    assert entity.city is None
    assert entity.price is None
    assert entity.currency == "EUR"
    assert entity.photos == []
    assert entity.main_photo_url is None


def test_update_resets_fields_missing_from_the_dict(db_session, sample_listing) -> None:
    repo = PropertyRepository(db_session)
    repo.upsert("test-id-1", _row(sample_listing))

    repo.upsert("test-id-1", {"reference": "REF-002"})

    entity = repo.find_by_external_id("test-id-1")
    assert entity.reference == "REF-002"
    assert entity.property_type is None
    assert entity.status == "active"
    assert entity.is_active is True


def test_find_by_external_id_is_case_sensitive(db_session, sample_listing) -> None:
    repo = PropertyRepository(db_session)
    repo.upsert("abc-1", _row(sample_listing))

    assert repo.find_by_external_id("abc-1") is not None
    assert repo.find_by_external_id("ABC-1") is None


def test_upsert_matches_soft_deleted_rows(db_session, sample_listing) -> None:
    repo = PropertyRepository(db_session)
    entity, _ = repo.upsert("test-id-1", _row(sample_listing))
    repo.soft_delete(entity)
    repo.commit()

    _, created = repo.upsert("test-id-1", _row(sample_listing))

    assert created is False
    assert len(_all(db_session)) == 1
    assert repo.find_by_external_id("test-id-1").deleted_at is not None


def test_upsert_wraps_database_errors(db_session, sample_listing) -> None:
    repo = PropertyRepository(db_session)

    with patch.object(db_session, "commit", side_effect=OperationalError("INSERT", {}, Exception("db down"))):
        with pytest.raises(PersistenceError):
            repo.upsert("test-id-1", _row(sample_listing))

    assert _all(db_session) == []


def test_session_is_usable_after_a_failed_upsert(db_session, sample_listing, make_listing) -> None:
    repo = PropertyRepository(db_session)

    with patch.object(db_session, "commit", side_effect=OperationalError("INSERT", {}, Exception("db down"))):
        with pytest.raises(PersistenceError):
            repo.upsert("test-id-1", _row(sample_listing))

    _, created = repo.upsert("test-id-2", _row(make_listing(id="test-id-2")))
    assert created is True
    assert [r.casafari_id for r in _all(db_session)] == ["test-id-2"]


def _seed(repo, make_listing) -> None:
    repo.upsert("a", _row(make_listing(id="a", type="apartment", price={"amount": 100000})))
    repo.upsert(
        "b",
        _row(make_listing(
            id="b",
            type="house",
            price={"amount": 300000},
            address={"city": "Porto", "country": "PT"},
        )),
    )
    repo.upsert("c", _row(make_listing(id="c", type="apartment", price={"amount": 500000}, is_active=False)))


def test_scopes_filter_queries(db_session, make_listing) -> None:
    repo = PropertyRepository(db_session)
    _seed(repo, make_listing)
    base = select(CasafariPropertyModel.casafari_id)

    def ids(stmt):
        return sorted(db_session.execute(stmt).scalars().all())

    assert ids(scope_active(base)) == ["a", "b"]
    assert ids(scope_of_type(base, "apartment")) == ["a", "c"]
    assert ids(scope_in_city(base, "Porto")) == ["b"]
    assert ids(scope_in_price_range(base, Decimal("200000"), None)) == ["b", "c"]
    assert ids(scope_in_price_range(base, None, Decimal("300000"))) == ["a", "b"]
    assert ids(scope_in_price_range(base, Decimal("200000"), Decimal("400000"))) == ["b"]


def test_trashed_modes(db_session, make_listing) -> None:
    repo = PropertyRepository(db_session)
    _seed(repo, make_listing)
    repo.soft_delete(repo.find_by_external_id("a"))
    repo.commit()

    assert {p.casafari_id for p in repo.list_properties()} == {"b", "c"}
    assert {p.casafari_id for p in repo.list_properties(trashed="with")} == {"a", "b", "c"}
    assert {p.casafari_id for p in repo.list_properties(trashed="only")} == {"a"}
    assert repo.count(trashed="with") == 3


def test_scope_trashed_rejects_unknown_mode() -> None:
    with pytest.raises(ValueError):
        scope_trashed(select(CasafariPropertyModel), "everything")


def test_list_and_count_with_filters(db_session, make_listing) -> None:
    repo = PropertyRepository(db_session)
    _seed(repo, make_listing)

    active_apartments = repo.list_properties(property_type="apartment", is_active=True)
    assert [p.casafari_id for p in active_apartments] == ["a"]
    assert repo.count(city="Lisbon") == 2
    assert repo.count(is_active=False) == 1
    assert len(repo.list_properties(limit=2)) == 2
    assert len(repo.list_properties(limit=2, offset=2)) == 1


def test_get_by_id_hides_trashed_unless_asked(db_session, sample_listing) -> None:
    repo = PropertyRepository(db_session)
    entity, _ = repo.upsert("test-id-1", _row(sample_listing))
    repo.soft_delete(entity)
    repo.commit()

    assert repo.get_by_id(entity.id) is None
    assert repo.get_by_id(entity.id, include_trashed=True) is not None

    repo.restore(entity)
    repo.commit()
    assert repo.get_by_id(entity.id) is not None


def test_force_delete_removes_the_row(db_session, sample_listing) -> None:
    repo = PropertyRepository(db_session)
    entity, _ = repo.upsert("test-id-1", _row(sample_listing))

    repo.force_delete(entity)
    repo.commit()

    assert _all(db_session) == []


def test_apply_changes_rejects_casafari_id(db_session, sample_listing) -> None:
    repo = PropertyRepository(db_session)
    entity, _ = repo.upsert("test-id-1", _row(sample_listing))

    with pytest.raises(ValueError):
        repo.apply_changes(entity, {"casafari_id": "other"})

    repo.apply_changes(entity, {"city": "Sintra"})
    repo.commit()
    assert repo.find_by_external_id("test-id-1").city == "Sintra"


def test_model_helpers(db_session, sample_listing) -> None:
    repo = PropertyRepository(db_session)
    entity, _ = repo.upsert("test-id-1", _row(sample_listing))

    assert entity.formatted_price == "250,000.00 EUR"
    assert "Lisbon" in entity.full_address
    assert entity.is_trashed is False


def test_upsert_stamps_last_synced_at(db_session) -> None:
    repo = PropertyRepository(db_session)

    created, _ = repo.upsert("x", {"price": Decimal("1.00")})
    assert created.last_synced_at is not None

    repo.upsert("x", {"price": Decimal("2.00"), "last_synced_at": None})
    assert repo.find_by_external_id("x").last_synced_at is not None


def test_upsert_keeps_given_last_synced_at(db_session, sample_listing) -> None:
    repo = PropertyRepository(db_session)

    entity, _ = repo.upsert("test-id-1", _row(sample_listing))

    assert entity.last_synced_at == SYNCED_AT
