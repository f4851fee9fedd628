from __future__ import annotations

import pytest

from rostersync.domain.errors import ValidationError
from rostersync.domain.model import (
    SERVER_TIMESTAMP,
    BaseFields,
    IdentityRecord,
    ProfileDocument,
    Role,
    ServerTimestamp,
    UserRecord,
)


@pytest.mark.parametrize(
    ("label", "role"),
    [
        ("student", Role.STUDENT),
        ("Teacher", Role.TEACHER),
        ("COMPANY", Role.COMPANY),
        ("alumni", Role.OTHER),
        (None, Role.OTHER),
    ],
)
def test_role_parse(label: str | None, role: Role) -> None:
    assert Role.parse(label) is role


def test_user_record_requires_email_and_uid() -> None:
    with pytest.raises(ValidationError) as exc:
        UserRecord(email="", uid="u1")

    assert exc.value.field == "email"

    with pytest.raises(ValidationError):
        UserRecord(email="a@x.com", uid="")


def test_user_record_hides_password_from_repr() -> None:
    record = UserRecord(email="a@x.com", uid="u1", password="secret-pass")

    assert "secret-pass" not in repr(record)


def test_identity_from_user_carries_credential() -> None:
    record = UserRecord(email="a@x.com", uid="u1", display_name="Ada", password="pw123456")

    assert IdentityRecord.from_user(record) == IdentityRecord(
        uid="u1", email="a@x.com", display_name="Ada", credential="pw123456"
    )


def test_server_timestamp_is_a_singleton() -> None:
    assert ServerTimestamp() is SERVER_TIMESTAMP


def test_profile_document_flattens_fields() -> None:
    document = ProfileDocument(
        uid="u1",
        email="a@x.com",
        role="Teacher",
        image_url=None,
        base=BaseFields(department="Physics"),
        role_attributes={"designation": "Professor"},
        timestamp_field="updatedAt",
    )

    assert document.to_fields() == {
        "email": "a@x.com",
        "role": "Teacher",
        "uid": "u1",
        "imageUrl": None,
        "department": "Physics",
        "branch": None,
        "course": None,
        "designation": "Professor",
        "updatedAt": SERVER_TIMESTAMP,
    }
