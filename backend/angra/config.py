"""
angra/config.py - Application configuration and Firebase initialization.

This module defines a Pydantic BaseSettings class to load configuration from environment,
and lazily initializes the Firebase Admin SDK (Firestore DB, Storage) using the provided
credentials. Routers receive `db` and `bucket` through the `get_db` / `get_bucket`
dependencies so they can be swapped out in tests.
"""
from functools import lru_cache
from typing import Optional

import firebase_admin
from firebase_admin import credentials, firestore, storage
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    firebase_cred_file: str = Field('firebase_service_account.json')
    firebase_project_id: str = Field(...)
    firebase_storage_bucket: str = Field(...)

    # Firebase credentials from environment variables (for Cloud Run)
    firebase_private_key_id: Optional[str] = None
    firebase_private_key: Optional[str] = None
    firebase_client_email: Optional[str] = None
    firebase_client_id: Optional[str] = None
    firebase_auth_uri: Optional[str] = None
    firebase_token_uri: Optional[str] = None
    firebase_auth_provider_x509_cert_url: Optional[str] = None
    firebase_client_x509_cert_url: Optional[str] = None

    firebase_web_api_key: str = Field(..., repr=False)
    identity_toolkit_url: str = "https://identitytoolkit.googleapis.com/v1"
    identity_timeout: float = 10.0

    # Recovery e-mails land on the site's reset page
    password_reset_redirect_url: Optional[str] = "https://thebestofangra.vercel.app/admin/reset"
    password_reset_locale: str = "pt"

    # 0 disables the background job
    profile_reconcile_minutes: int = 30

    debug: bool = False
    log_level: str = "INFO"
    allowed_origins: str = '*'  # Comma-separated list or '*' for all

    @field_validator("firebase_web_api_key")
    @classmethod
    def _check_web_api_key(cls, value: str) -> str:
        if not value or not value.startswith('AIza'):
            raise ValueError("FIREBASE_WEB_API_KEY must be a valid Firebase Web API Key starting with 'AIza'")
        return value

    def service_account(self) -> Optional[dict]:
        """Service account dict built from env vars, or None when the file should be used."""
        if not all([
            self.firebase_private_key_id,
            self.firebase_private_key,
            self.firebase_client_email,
            self.firebase_client_id,
            self.firebase_auth_uri,
            self.firebase_token_uri,
            self.firebase_auth_provider_x509_cert_url,
            self.firebase_client_x509_cert_url,
        ]):
            return None
        return {
            "type": "service_account",
            "project_id": self.firebase_project_id,
            "private_key_id": self.firebase_private_key_id,
            # Cloud Run stores the key with escaped newlines
            "private_key": self.firebase_private_key.replace("\\n", "\n"),
            "client_email": self.firebase_client_email,
            "client_id": self.firebase_client_id,
            "auth_uri": self.firebase_auth_uri,
            "token_uri": self.firebase_token_uri,
            "auth_provider_x509_cert_url": self.firebase_auth_provider_x509_cert_url,
            "client_x509_cert_url": self.firebase_client_x509_cert_url,
        }


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


@lru_cache(maxsize=1)
def get_firebase_app() -> firebase_admin.App:
    """Initialize the Admin SDK once; reuse the default app if it already exists."""
    settings = get_settings()
    cred_dict = settings.service_account()
    if cred_dict:
        cred = credentials.Certificate(cred_dict)
    else:
        # Use service account file (local development)
        cred = credentials.Certificate(settings.firebase_cred_file)
    try:
        return firebase_admin.initialize_app(cred, {
            'projectId': settings.firebase_project_id,
            'storageBucket': settings.firebase_storage_bucket,
        })
    except ValueError as e:
        if "already exists" in str(e):
            return firebase_admin.get_app()
        raise


def get_db():
    """Firestore database client."""
    return firestore.client(app=get_firebase_app())


def get_bucket():
    """Default storage bucket."""
    return storage.bucket(app=get_firebase_app())
