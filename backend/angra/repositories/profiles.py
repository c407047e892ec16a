from typing import Any, Dict, List, Optional

from google.cloud import firestore as gcf

from angra.core.roles import Role, coerce_role
from angra.schemas.session import Profile

COL = "profiles"


def to_profile(uid: str, data: Dict[str, Any]) -> Profile:
    return Profile(
        uid=uid,
        display_name=data.get("display_name") or None,
        email=data.get("email") or None,
        role=coerce_role(data.get("role")),
        created_at=data.get("created_at"),
    )


class ProfileRepository:
    """Firestore `profiles/{uid}` documents: display name + access role."""

    def __init__(self, db):
        self._db = db

    def _ref(self, uid: str):
        return self._db.collection(COL).document(uid)

    def get(self, uid: str) -> Optional[Profile]:
        doc = self._ref(uid).get()
        return to_profile(uid, doc.to_dict() or {}) if doc.exists else None

    def create(self, uid: str, display_name: Optional[str], email: Optional[str],
               role: Role = Role.CLIENT) -> None:
        self._ref(uid).set({
            "display_name": display_name or "",
            "email": email or "",
            "role": role.value,
            "created_at": gcf.SERVER_TIMESTAMP,
        })

    def _upsert(self, uid: str, patch: Dict[str, Any]) -> Profile:
        ref = self._ref(uid)
        patch = {**patch, "updated_at": gcf.SERVER_TIMESTAMP}
        if not ref.get().exists:
            # list() orders by created_at; rows without it would be skipped
            patch["created_at"] = gcf.SERVER_TIMESTAMP
        ref.set(patch, merge=True)
        return to_profile(uid, ref.get().to_dict() or {})

    def update_role(self, uid: str, role: Role, email: Optional[str] = None) -> Profile:
        """Upsert: a principal without a row gets one carrying the role."""
        patch = {"role": role.value}
        if email:
            patch["email"] = email
        return self._upsert(uid, patch)

    def update_display_name(self, uid: str, display_name: str) -> Profile:
        return self._upsert(uid, {"display_name": display_name})

    def list(self) -> List[Profile]:
        q = self._db.collection(COL).order_by("created_at", direction=gcf.Query.DESCENDING)
        return [to_profile(d.id, d.to_dict() or {}) for d in q.stream()]

    def ids(self) -> set:
        return {d.id for d in self._db.collection(COL).stream()}

    def count(self) -> int:
        return sum(1 for _ in self._db.collection(COL).stream())

    def delete(self, uid: str) -> None:
        self._ref(uid).delete()
