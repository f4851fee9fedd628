from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

import pytest

from rostersync.adapters.sqlalchemy import (
    SqlAlchemyIdentityDirectory,
    SqlAlchemyProfileStore,
    hash_credential,
    verify_credential,
)
from rostersync.domain.errors import DirectoryError, NotFoundError
from rostersync.domain.model import IdentityAction, IdentityRecord, WriteMode
from rostersync.domain.reconciliation import compose_profile, normalize_record
from tests.helpers.stores import make_raw

if TYPE_CHECKING:
    from sqlalchemy.orm import Session, sessionmaker

FIXED_NOW = datetime(2024, 5, 1, 12, 0, tzinfo=UTC)


def _clock() -> datetime:
    return FIXED_NOW


@pytest.fixture
def directory(sql_session_factory: sessionmaker[Session]) -> SqlAlchemyIdentityDirectory:
    return SqlAlchemyIdentityDirectory(sql_session_factory, clock=_clock)


@pytest.fixture
def profiles(sql_session_factory: sessionmaker[Session]) -> SqlAlchemyProfileStore:
    return SqlAlchemyProfileStore(sql_session_factory, clock=_clock)


def test_credential_hash_verifies_only_the_original() -> None:
    encoded = hash_credential("secret-pass")

    assert encoded.startswith("pbkdf2_sha256$")
    assert "secret-pass" not in encoded
    assert verify_credential("secret-pass", encoded)
    assert not verify_credential("other", encoded)
    assert not verify_credential("secret-pass", "garbage")


def test_create_then_lookup_by_email(directory: SqlAlchemyIdentityDirectory) -> None:
    created = directory.create(
        IdentityRecord(uid="u1", email="a@x.com", display_name="Ada", credential="pw123456")
    )

    assert created == IdentityRecord(uid="u1", email="a@x.com", display_name="Ada")
    assert directory.lookup_by_email("a@x.com") == created
    stored = directory.credential_hash("u1")
    assert stored is not None
    assert verify_credential("pw123456", stored)


def test_lookup_of_unknown_email_is_not_found(directory: SqlAlchemyIdentityDirectory) -> None:
    with pytest.raises(NotFoundError):
        directory.lookup_by_email("nobody@x.com")


def test_duplicate_email_is_directory_error(directory: SqlAlchemyIdentityDirectory) -> None:
    directory.create(IdentityRecord(uid="u1", email="a@x.com"))

    with pytest.raises(DirectoryError):
        directory.create(IdentityRecord(uid="u2", email="a@x.com"))


def test_update_overwrites_fields_and_keeps_credential_when_absent(
    directory: SqlAlchemyIdentityDirectory,
) -> None:
    directory.create(IdentityRecord(uid="u1", email="a@x.com", credential="pw123456"))
    original_hash = directory.credential_hash("u1")

    updated = directory.update("u1", IdentityRecord(uid="u1", email="b@x.com", display_name="Bea"))

    assert updated == IdentityRecord(uid="u1", email="b@x.com", display_name="Bea")
    assert directory.lookup_by_email("b@x.com").display_name == "Bea"
    assert directory.credential_hash("u1") == original_hash


def test_update_can_move_identity_to_new_uid(directory: SqlAlchemyIdentityDirectory) -> None:
    directory.create(IdentityRecord(uid="legacy", email="a@x.com"))

    directory.update("legacy", IdentityRecord(uid="u1", email="a@x.com"))

    assert directory.lookup_by_email("a@x.com").uid == "u1"


def test_update_of_unknown_uid_is_not_found(directory: SqlAlchemyIdentityDirectory) -> None:
    with pytest.raises(NotFoundError):
        directory.update("ghost", IdentityRecord(uid="ghost", email="g@x.com"))


def test_replace_creates_document_with_resolved_timestamp(
    profiles: SqlAlchemyProfileStore,
) -> None:
    document = compose_profile(
        normalize_record(make_raw()), image_url="https://img", action=IdentityAction.CREATED
    )

    profiles.upsert("u1", document, WriteMode.REPLACE)

    stored = profiles.get("u1")
    assert stored is not None
    assert stored["createdAt"] == FIXED_NOW.isoformat()
    assert stored["imageUrl"] == "https://img"
    assert stored["year"] == "2"


def test_merge_keeps_fields_not_written(profiles: SqlAlchemyProfileStore) -> None:
    first = compose_profile(
        normalize_record(make_raw()), image_url="https://img", action=IdentityAction.CREATED
    )
    profiles.upsert("u1", first, WriteMode.REPLACE)
    second = compose_profile(
        normalize_record(make_raw(role="teacher", designation="Lecturer")),
        image_url=None,
        action=IdentityAction.UPDATED,
    )

    profiles.upsert("u1", second, WriteMode.MERGE)

    stored = profiles.get("u1")
    assert stored is not None
    assert stored["role"] == "teacher"
    assert stored["designation"] == "Lecturer"
    assert stored["year"] == "2"
    assert stored["createdAt"] == FIXED_NOW.isoformat()
    assert stored["updatedAt"] == FIXED_NOW.isoformat()


def test_replace_discards_previous_fields(profiles: SqlAlchemyProfileStore) -> None:
    first = compose_profile(
        normalize_record(make_raw()), image_url=None, action=IdentityAction.CREATED
    )
    profiles.upsert("u1", first, WriteMode.REPLACE)
    second = compose_profile(
        normalize_record(make_raw(role="teacher", designation="Lecturer")),
        image_url=None,
        action=IdentityAction.CREATED,
    )

    profiles.upsert("u1", second, WriteMode.REPLACE)

    stored = profiles.get("u1")
    assert stored is not None
    assert "year" not in stored
    assert stored["designation"] == "Lecturer"


def test_get_of_unknown_uid_is_none(profiles: SqlAlchemyProfileStore) -> None:
    assert profiles.get("ghost") is None
