"""Firebase project configuration values."""

from __future__ import annotations

from dataclasses import dataclass, field

from .env import optional_env_var, require_env_vars
from .http_resilience import RateLimit, ResilienceConfig

IDENTITY_TOOLKIT_BASE_URL = "https://identitytoolkit.googleapis.com/v1/"
FIRESTORE_BASE_URL = "https://firestore.googleapis.com/v1/"
STORAGE_UPLOAD_BASE_URL = "https://storage.googleapis.com/upload/storage/v1/"
STORAGE_DOWNLOAD_HOST = "firebasestorage.googleapis.com"
DEFAULT_PROFILE_COLLECTION = "users"
FIREBASE_TIMEOUT_SECONDS = 30.0


def _auth_headers(access_token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {access_token}"}


@dataclass(frozen=True)
class FirebaseConfig:
    """Holds Firebase project settings and an already-minted OAuth2 access token."""

    project_id: str
    storage_bucket: str
    access_token: str = field(repr=False)
    profile_collection: str = DEFAULT_PROFILE_COLLECTION
    database_id: str = "(default)"
    download_host: str = STORAGE_DOWNLOAD_HOST

    def identity_resilience(self) -> ResilienceConfig:
        return ResilienceConfig(
            name="firebase-auth",
            base_url=IDENTITY_TOOLKIT_BASE_URL,
            timeout_seconds=FIREBASE_TIMEOUT_SECONDS,
            ratelimit=RateLimit(max_calls=10, per_seconds=1.0),
            default_headers=_auth_headers(self.access_token),
        )

    def firestore_resilience(self) -> ResilienceConfig:
        return ResilienceConfig(
            name="firestore",
            base_url=FIRESTORE_BASE_URL,
            timeout_seconds=FIREBASE_TIMEOUT_SECONDS,
            default_headers=_auth_headers(self.access_token),
        )

    def storage_resilience(self) -> ResilienceConfig:
        return ResilienceConfig(
            name="cloud-storage",
            base_url=STORAGE_UPLOAD_BASE_URL,
            timeout_seconds=FIREBASE_TIMEOUT_SECONDS * 4,
            default_headers=_auth_headers(self.access_token),
        )


def get_firebase_config() -> FirebaseConfig:
    values = require_env_vars(
        ("FIREBASE_PROJECT_ID", "FIREBASE_STORAGE_BUCKET", "FIREBASE_ACCESS_TOKEN")
    )
    return FirebaseConfig(
        project_id=values["FIREBASE_PROJECT_ID"],
        storage_bucket=values["FIREBASE_STORAGE_BUCKET"],
        access_token=values["FIREBASE_ACCESS_TOKEN"],
        profile_collection=optional_env_var(
            "FIREBASE_PROFILE_COLLECTION", DEFAULT_PROFILE_COLLECTION
        ),
    )
