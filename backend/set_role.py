#!/usr/bin/env python3
"""
Sets the access role of a user, looked up by e-mail, with the Firebase Admin SDK.
Used to create the first administrator.

Usage: python set_role.py <user_email> [admin|operator|client]
"""

import logging
import sys

from dotenv import load_dotenv
from firebase_admin import auth
from firebase_admin.exceptions import FirebaseError
from google.api_core.exceptions import GoogleAPIError

from angra.config import get_db, get_firebase_app
from angra.core.roles import Role, parse_role
from angra.repositories.profiles import ProfileRepository
from angra.schemas.session import Profile

logger = logging.getLogger("set_role")


def set_role(profiles: ProfileRepository, user_email: str, role: Role,
             get_user=auth.get_user_by_email) -> Profile:
    """Finds the user by e-mail and upserts its profile row with `role`."""
    user = get_user(user_email)
    logger.info("User found: %s - %s", user.uid, user.email)
    return profiles.update_role(user.uid, role, email=user.email or user_email)


def main(argv) -> int:
    if len(argv) not in (2, 3):
        print("Usage: python set_role.py <user_email> [admin|operator|client]")
        print("Example: python set_role.py owner@example.com admin")
        return 1

    user_email = argv[1]
    role = parse_role(argv[2]) if len(argv) == 3 else Role.ADMIN
    if role is None:
        print(f"Invalid role: {argv[2]}")
        return 1

    load_dotenv()
    get_firebase_app()

    try:
        profile = set_role(ProfileRepository(get_db()), user_email, role)
    except auth.UserNotFoundError:
        print(f"User not found: {user_email}")
        return 1
    except (FirebaseError, GoogleAPIError) as e:
        print(f"Error setting role: {e}")
        return 1

    print(f"Role '{profile.role.value}' set for: {user_email}")
    print("The user will need to sign in again for the changes to take effect.")
    return 0


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    sys.exit(main(sys.argv))
