"""Identity directory and profile store implementations backed by SQLAlchemy.

Every port call runs in its own transaction and commits on its own, so a profile
write failing never undoes the identity write made for the same record.
"""

from __future__ import annotations

import hashlib
import hmac
import secrets
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Final, cast

from sqlalchemy import insert, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from rostersync.domain.errors import DirectoryError, NotFoundError, ProfileStoreError
from rostersync.domain.model import IdentityRecord, ServerTimestamp, WriteMode

from .database import session_factory as default_session_factory
from .mappings import identity_table, profile_table

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from sqlalchemy.orm import Session, sessionmaker

    from rostersync.domain.model import ProfileDocument

PBKDF2_ITERATIONS: Final[int] = 240_000
_HASH_SCHEME: Final[str] = "pbkdf2_sha256"


def _utcnow() -> datetime:
    return datetime.now(UTC)


def hash_credential(credential: str, *, salt: bytes | None = None) -> str:
    """Return a salted PBKDF2 hash suitable for storing instead of the plaintext."""

    salt_bytes = salt or secrets.token_bytes(16)
    digest = hashlib.pbkdf2_hmac(
        "sha256", credential.encode("utf-8"), salt_bytes, PBKDF2_ITERATIONS
    )
    return f"{_HASH_SCHEME}${PBKDF2_ITERATIONS}${salt_bytes.hex()}${digest.hex()}"


def verify_credential(credential: str, encoded: str) -> bool:
    try:
        scheme, iterations, salt_hex, digest_hex = encoded.split("$")
    except ValueError:
        return False
    if scheme != _HASH_SCHEME:
        return False
    digest = hashlib.pbkdf2_hmac(
        "sha256", credential.encode("utf-8"), bytes.fromhex(salt_hex), int(iterations)
    )
    return hmac.compare_digest(digest.hex(), digest_hex)


def resolve_server_timestamps(fields: Mapping[str, object], now: datetime) -> dict[str, object]:
    """Replace server-timestamp placeholders with ``now`` in ISO-8601 form."""

    stamp = now.isoformat()
    return {
        name: stamp if isinstance(value, ServerTimestamp) else value
        for name, value in fields.items()
    }


class SqlAlchemyIdentityDirectory:
    def __init__(
        self,
        session_factory: sessionmaker[Session] | None = None,
        *,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.session_factory = session_factory or default_session_factory()
        self._clock = clock

    def lookup_by_email(self, email: str) -> IdentityRecord:
        stmt = select(
            identity_table.c.uid, identity_table.c.email, identity_table.c.display_name
        ).where(identity_table.c.email == email)
        try:
            with self.session_factory() as session:
                row = session.execute(stmt).mappings().one_or_none()
        except SQLAlchemyError as exc:
            raise DirectoryError(f"Identity lookup failed for {email}: {exc}") from exc
        if row is None:
            raise NotFoundError(f"No identity registered for {email}")
        return IdentityRecord(uid=row["uid"], email=row["email"], display_name=row["display_name"])

    def create(self, identity: IdentityRecord) -> IdentityRecord:
        values: dict[str, object] = {
            "uid": identity.uid,
            "email": identity.email,
            "display_name": identity.display_name,
            "credential_hash": (
                hash_credential(identity.credential) if identity.credential is not None else None
            ),
            "created_at": self._clock(),
        }
        try:
            with self.session_factory.begin() as session:
                session.execute(insert(identity_table).values(**values))
        except IntegrityError as exc:
            raise DirectoryError(
                f"Identity {identity.uid} or email {identity.email} is already registered"
            ) from exc
        except SQLAlchemyError as exc:
            raise DirectoryError(f"Identity create failed for {identity.email}: {exc}") from exc
        return IdentityRecord(
            uid=identity.uid, email=identity.email, display_name=identity.display_name
        )

    def update(self, uid: str, changes: IdentityRecord) -> IdentityRecord:
        values: dict[str, object] = {
            "uid": changes.uid,
            "email": changes.email,
            "display_name": changes.display_name,
            "updated_at": self._clock(),
        }
        if changes.credential is not None:
            values["credential_hash"] = hash_credential(changes.credential)

        stmt = update(identity_table).where(identity_table.c.uid == uid).values(**values)
        try:
            with self.session_factory.begin() as session:
                result = session.execute(stmt)
                if result.rowcount == 0:
                    raise NotFoundError(f"No identity with uid {uid}")
        except IntegrityError as exc:
            raise DirectoryError(
                f"Cannot move identity {uid} to uid {changes.uid} / email {changes.email}"
            ) from exc
        except SQLAlchemyError as exc:
            raise DirectoryError(f"Identity update failed for {changes.email}: {exc}") from exc
        return IdentityRecord(
            uid=changes.uid, email=changes.email, display_name=changes.display_name
        )

    def credential_hash(self, uid: str) -> str | None:
        stmt = select(identity_table.c.credential_hash).where(identity_table.c.uid == uid)
        with self.session_factory() as session:
            return session.execute(stmt).scalar_one_or_none()


class SqlAlchemyProfileStore:
    def __init__(
        self,
        session_factory: sessionmaker[Session] | None = None,
        *,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.session_factory = session_factory or default_session_factory()
        self._clock = clock

    def upsert(self, uid: str, document: ProfileDocument, mode: WriteMode) -> None:
        now = self._clock()
        fields = resolve_server_timestamps(document.to_fields(), now)
        try:
            with self.session_factory.begin() as session:
                existing = session.execute(
                    select(profile_table.c.document).where(profile_table.c.uid == uid)
                ).scalar_one_or_none()
                if existing is None:
                    session.execute(
                        insert(profile_table).values(
                            uid=uid, document=fields, created_at=now, updated_at=now
                        )
                    )
                    return
                merged = (
                    {**cast("dict[str, object]", existing), **fields}
                    if mode is WriteMode.MERGE
                    else fields
                )
                session.execute(
                    update(profile_table)
                    .where(profile_table.c.uid == uid)
                    .values(document=merged, updated_at=now)
                )
        except SQLAlchemyError as exc:
            raise ProfileStoreError(f"Profile write failed for {uid}: {exc}") from exc

    def get(self, uid: str) -> dict[str, object] | None:
        """Return the stored document for ``uid`` (``None`` when absent)."""

        stmt = select(profile_table.c.document).where(profile_table.c.uid == uid)
        try:
            with self.session_factory() as session:
                document = session.execute(stmt).scalar_one_or_none()
        except SQLAlchemyError as exc:
            raise ProfileStoreError(f"Profile read failed for {uid}: {exc}") from exc
        return dict(cast("dict[str, object]", document)) if document is not None else None


if TYPE_CHECKING:
    from rostersync.domain.ports.identity import IdentityDirectory
    from rostersync.domain.ports.profiles import ProfileStore

    _directory_check: IdentityDirectory = SqlAlchemyIdentityDirectory(
        cast("sessionmaker[Session]", object())
    )
    _store_check: ProfileStore = SqlAlchemyProfileStore(cast("sessionmaker[Session]", object()))
