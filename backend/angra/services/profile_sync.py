# angra/services/profile_sync.py
from __future__ import annotations

import logging
from typing import Iterable

from firebase_admin.exceptions import FirebaseError
from google.api_core.exceptions import GoogleAPIError

from angra.config import get_db
from angra.core.roles import Role
from angra.core.security import get_identity_provider
from angra.repositories.profiles import ProfileRepository
from angra.schemas.session import Principal

logger = logging.getLogger(__name__)


def reconcile_profiles_once(profiles: ProfileRepository, principals: Iterable[Principal]) -> int:
    """
    Creates a `client` profile for every principal that has none
    (sign-ups whose profile insert failed).
    Returns: number of profiles created.
    """
    existing = profiles.ids()
    created = 0
    for p in principals:
        if p.uid in existing:
            continue
        profiles.create(p.uid, p.display_name, p.email, Role.CLIENT)
        existing.add(p.uid)
        created += 1
    return created


def run_reconciliation() -> int:
    """Scheduler entry point; failures are logged and retried on the next run."""
    try:
        principals = get_identity_provider().list_principals()
        created = reconcile_profiles_once(ProfileRepository(get_db()), principals)
    except (FirebaseError, GoogleAPIError):
        logger.exception("Profile reconciliation failed")
        return 0
    if created:
        logger.info("Profile reconciliation created %d client profile(s)", created)
    return created
