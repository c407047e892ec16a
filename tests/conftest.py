import itertools
import os
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

# Settings are read on first import of the app
os.environ.setdefault("FIREBASE_PROJECT_ID", "angra-test")
os.environ.setdefault("FIREBASE_STORAGE_BUCKET", "angra-test.appspot.com")
os.environ.setdefault("FIREBASE_WEB_API_KEY", "AIza-test-key")
os.environ.setdefault("PROFILE_RECONCILE_MINUTES", "0")

import pytest
from fastapi.testclient import TestClient
from google.api_core.exceptions import InvalidArgument, NotFound
from google.cloud.firestore_v1 import SERVER_TIMESTAMP

from angra.config import get_bucket, get_db
from angra.core.roles import Role
from angra.core.security import get_identity_provider
from angra.repositories.profiles import ProfileRepository
from angra.schemas.session import AuthResult, Principal, ProviderSession


# ---------------------------------------------------------------------------
# Firestore
# ---------------------------------------------------------------------------

_OPS = {
    "==": lambda a, b: a == b,
    "!=": lambda a, b: a != b,
    "<": lambda a, b: a is not None and a < b,
    "<=": lambda a, b: a is not None and a <= b,
    ">": lambda a, b: a is not None and a > b,
    ">=": lambda a, b: a is not None and a >= b,
    "in": lambda a, b: a in b,
}


class FakeSnapshot:
    def __init__(self, ref: "FakeDocRef", data: Optional[Dict[str, Any]]):
        self.reference = ref
        self.id = ref.id
        self._data = data

    @property
    def exists(self) -> bool:
        return self._data is not None

    def to_dict(self) -> Optional[Dict[str, Any]]:
        return dict(self._data) if self._data is not None else None


class FakeDocRef:
    def __init__(self, db: "FakeFirestore", collection: str, doc_id: str):
        self._db = db
        self._collection = collection
        self.id = doc_id

    @property
    def _rows(self) -> Dict[str, Dict[str, Any]]:
        return self._db.data.setdefault(self._collection, {})

    def get(self) -> FakeSnapshot:
        row = self._rows.get(self.id)
        return FakeSnapshot(self, row)

    def set(self, data: Dict[str, Any], merge: bool = False) -> None:
        self._db.writes += 1
        data = self._db.resolve(data)
        if merge and self.id in self._rows:
            self._rows[self.id].update(data)
        else:
            self._rows[self.id] = data

    def update(self, data: Dict[str, Any]) -> None:
        if self.id not in self._rows:
            raise NotFound(f"{self._collection}/{self.id}")
        self._db.writes += 1
        self._rows[self.id].update(self._db.resolve(data))

    def delete(self) -> None:
        self._db.writes += 1
        self._rows.pop(self.id, None)


class FakeQuery:
    def __init__(self, db: "FakeFirestore", collection: str, filters=None, order=None, limit=None):
        self._db = db
        self._collection = collection
        self._filters = list(filters or [])
        self._order = list(order or [])
        self._limit = limit

    def _copy(self, **kw) -> "FakeQuery":
        args = dict(filters=self._filters, order=self._order, limit=self._limit)
        args.update(kw)
        return FakeQuery(self._db, self._collection, **args)

    def where(self, field_path=None, op_string=None, value=None, *, filter=None) -> "FakeQuery":
        if filter is not None:
            field_path, op_string, value = filter.field_path, filter.op_string, filter.value
        return self._copy(filters=self._filters + [(field_path, op_string, value)])

    def order_by(self, field: str, direction: str = "ASCENDING") -> "FakeQuery":
        return self._copy(order=self._order + [(field, direction)])

    def limit(self, n: int) -> "FakeQuery":
        return self._copy(limit=n)

    def stream(self):
        rows = self._db.data.get(self._collection, {})
        items = [(doc_id, row) for doc_id, row in rows.items()
                 if all(_OPS[op](row.get(f), v) for f, op, v in self._filters)]
        for field, direction in reversed(self._order):
            # Firestore leaves out documents without the ordered field
            items = [i for i in items if i[1].get(field) is not None]
            items.sort(key=lambda i: i[1][field], reverse=direction == "DESCENDING")
        if self._limit is not None:
            items = items[: self._limit]
        for doc_id, row in items:
            yield FakeSnapshot(FakeDocRef(self._db, self._collection, doc_id), row)


class FakeCollection(FakeQuery):
    def document(self, doc_id: Optional[str] = None) -> FakeDocRef:
        if doc_id is None:
            doc_id = f"{self._collection}-{next(self._db.ids)}"
        return FakeDocRef(self._db, self._collection, doc_id)


class FakeBatch:
    MAX_WRITES = 500

    def __init__(self):
        self._ops = []

    def set(self, ref, data, merge=False):
        self._ops.append(lambda: ref.set(data, merge=merge))

    def update(self, ref, data):
        self._ops.append(lambda: ref.update(data))

    def delete(self, ref):
        self._ops.append(ref.delete)

    def commit(self):
        if len(self._ops) > self.MAX_WRITES:
            raise InvalidArgument("maximum 500 writes allowed per request")
        for op in self._ops:
            op()


class FakeFirestore:
    """In-memory stand-in for the handful of Firestore calls the app makes."""

    def __init__(self):
        self.data: Dict[str, Dict[str, Dict[str, Any]]] = {}
        self.writes = 0
        self.ids = itertools.count(1)
        self._clock = itertools.count(1)
        self._epoch = datetime(2024, 1, 1, tzinfo=timezone.utc)

    def resolve(self, data: Dict[str, Any]) -> Dict[str, Any]:
        out = {}
        for k, v in data.items():
            if v is SERVER_TIMESTAMP:
                # strictly increasing so "newest first" is deterministic
                v = self._epoch + timedelta(seconds=next(self._clock))
            out[k] = v
        return out

    def collection(self, name: str) -> FakeCollection:
        return FakeCollection(self, name)

    def batch(self) -> FakeBatch:
        return FakeBatch()

    def rows(self, name: str) -> Dict[str, Dict[str, Any]]:
        return self.data.get(name, {})


# ---------------------------------------------------------------------------
# Storage
# ---------------------------------------------------------------------------

class FakeBlob:
    def __init__(self, bucket: "FakeBucket", name: str):
        self._bucket = bucket
        self.name = name

    def upload_from_string(self, data, content_type=None):
        self._bucket.objects[self.name] = {"data": data, "content_type": content_type}

    def make_public(self):
        pass

    @property
    def public_url(self) -> str:
        return f"https://storage.googleapis.com/{self._bucket.name}/{self.name}"

    def generate_signed_url(self, expiration=None):
        return f"{self.public_url}?signed=1"

    def delete(self):
        if self.name not in self._bucket.objects:
            raise NotFound(self.name)
        del self._bucket.objects[self.name]


class FakeBucket:
    name = "angra-test.appspot.com"

    def __init__(self):
        self.objects: Dict[str, Dict[str, Any]] = {}

    def blob(self, name: str) -> FakeBlob:
        return FakeBlob(self, name)


# ---------------------------------------------------------------------------
# Identity provider
# ---------------------------------------------------------------------------

class FakeIdentityProvider:
    """Users live in memory; the ID token of `uid` is `token-<uid>`."""

    def __init__(self):
        self.users: Dict[str, Dict[str, Any]] = {}
        self.revoked: List[str] = []
        self.deleted: List[str] = []
        self.reset_requests: List[str] = []
        self.password_updates: List[Dict[str, Any]] = []

    def add_user(self, uid: str, email: str, password: str = "secret123", name: Optional[str] = None) -> Principal:
        self.users[uid] = {"email": email, "password": password, "name": name}
        return self.principal(uid)

    def principal(self, uid: str) -> Principal:
        u = self.users[uid]
        return Principal(uid=uid, email=u["email"], display_name=u["name"])

    def _session(self, uid: str) -> ProviderSession:
        return ProviderSession(
            id_token=f"token-{uid}", refresh_token=f"refresh-{uid}",
            expires_in=3600, principal=self.principal(uid),
        )

    async def verify_session(self, id_token: str) -> Optional[Principal]:
        uid = id_token[len("token-"):] if id_token.startswith("token-") else None
        if uid not in self.users:
            return None
        return self.principal(uid)

    async def sign_in_with_password(self, email: str, password: str) -> AuthResult:
        for uid, u in self.users.items():
            if u["email"] == email and u["password"] == password:
                return AuthResult(session=self._session(uid))
        return AuthResult.failure("invalid_login_credentials", "Invalid e-mail or password")

    async def sign_up(self, email: str, password: str, display_name: str) -> AuthResult:
        if any(u["email"] == email for u in self.users.values()):
            return AuthResult.failure("email_exists", "This e-mail is already registered")
        uid = f"uid-{len(self.users) + 1}"
        self.add_user(uid, email, password, display_name)
        return AuthResult(session=self._session(uid))

    async def sign_out(self, uid: str) -> None:
        self.revoked.append(uid)

    async def send_password_reset_email(self, email: str) -> AuthResult:
        self.reset_requests.append(email)
        return AuthResult()

    async def update_password(self, new_password: str, id_token: Optional[str] = None,
                              oob_code: Optional[str] = None) -> AuthResult:
        self.password_updates.append({"id_token": id_token, "oob_code": oob_code, "password": new_password})
        if oob_code:
            return AuthResult() if oob_code == "good-code" else AuthResult.failure(
                "invalid_oob_code", "Recovery link is invalid or was already used"
            )
        if not id_token:
            return AuthResult.failure("not_authenticated", "A session or recovery code is required")
        return AuthResult(session=self._session(id_token[len("token-"):]))

    async def delete_user(self, uid: str) -> AuthResult:
        self.deleted.append(uid)
        self.users.pop(uid, None)
        return AuthResult()

    def list_principals(self) -> List[Principal]:
        return [self.principal(uid) for uid in self.users]


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def db() -> FakeFirestore:
    return FakeFirestore()


@pytest.fixture
def bucket() -> FakeBucket:
    return FakeBucket()


@pytest.fixture
def identity() -> FakeIdentityProvider:
    return FakeIdentityProvider()


@pytest.fixture
def profiles(db) -> ProfileRepository:
    return ProfileRepository(db)


@pytest.fixture
def make_user(identity, profiles):
    """Registers a principal; `role=None` leaves it without a profile row."""
    def _make(uid: str, role: Optional[Role] = Role.CLIENT, email: Optional[str] = None) -> Dict[str, str]:
        email = email or f"{uid}@example.com"
        identity.add_user(uid, email, name=uid.title())
        if role is not None:
            profiles.create(uid, uid.title(), email, role)
        return {"Authorization": f"Bearer token-{uid}"}
    return _make


@pytest.fixture
def app(db, bucket, identity):
    from angra.main import app as fastapi_app

    fastapi_app.dependency_overrides[get_db] = lambda: db
    fastapi_app.dependency_overrides[get_bucket] = lambda: bucket
    fastapi_app.dependency_overrides[get_identity_provider] = lambda: identity
    yield fastapi_app
    fastapi_app.dependency_overrides.clear()


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)


@pytest.fixture
def admin_headers(make_user):
    return make_user("admin1", Role.ADMIN)


@pytest.fixture
def operator_headers(make_user):
    return make_user("operator1", Role.OPERATOR)


@pytest.fixture
def client_headers(make_user):
    return make_user("client1", Role.CLIENT)
