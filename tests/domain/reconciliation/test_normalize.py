from __future__ import annotations

from pathlib import Path

import pytest

from rostersync.domain.errors import ValidationError
from rostersync.domain.model import BaseFields, Role, UserRecord
from rostersync.domain.reconciliation import ROLE_ATTRIBUTES, normalize_record
from tests.helpers.stores import make_raw


@pytest.mark.parametrize("missing", ["email", "uid"])
def test_missing_required_field_raises_validation_error(missing: str) -> None:
    raw = make_raw()
    del raw[missing]

    with pytest.raises(ValidationError) as excinfo:
        normalize_record(raw)

    assert excinfo.value.field == missing


def test_blank_required_field_raises_validation_error() -> None:
    with pytest.raises(ValidationError):
        normalize_record(make_raw(uid="   "))


def test_student_record_keeps_only_student_attributes() -> None:
    record = normalize_record(make_raw(designation="Professor", company_type="IT"))

    assert record.role is Role.STUDENT
    assert record.role_attributes == {"year": "2", "semester": "4"}


def test_fields_are_stripped_and_blank_optionals_become_none() -> None:
    record = normalize_record(
        make_raw(email="  a@x.com ", name=" Ada ", branch="", course="   ", password="")
    )

    assert record.email == "a@x.com"
    assert record.display_name == "Ada"
    assert record.password is None
    assert record.base == BaseFields(department="Engineering", branch=None, course=None)


def test_role_dispatch_is_case_insensitive_but_label_is_preserved() -> None:
    record = normalize_record(make_raw(role="Teacher", designation="Lecturer"))

    assert record.role is Role.TEACHER
    assert record.role_label == "Teacher"
    assert record.role_attributes == {"designation": "Lecturer"}


def test_unknown_role_yields_no_role_attributes() -> None:
    record = normalize_record(make_raw(role="admin"))

    assert record.role is Role.OTHER
    assert record.role_label == "admin"
    assert record.role_attributes == {}


def test_missing_role_attribute_columns_become_none() -> None:
    raw = make_raw(role="company")
    del raw["company_location"]
    raw["company_type"] = "Startup"

    record = normalize_record(raw)

    assert record.role_attributes == {"company_type": "Startup", "company_location": None}


def test_image_path_is_parsed_when_present() -> None:
    assert normalize_record(make_raw()).image_path is None
    assert normalize_record(make_raw(imagePath="photos/ada.jpg")).image_path == Path(
        "photos/ada.jpg"
    )


def test_role_table_covers_every_role() -> None:
    assert set(ROLE_ATTRIBUTES) == set(Role)


def test_user_record_enforces_required_keys() -> None:
    with pytest.raises(ValidationError):
        UserRecord(email="", uid="u1")
