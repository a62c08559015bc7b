import os
import tempfile
from datetime import datetime, timedelta, timezone

# Point settings at throwaway locations BEFORE any app imports
_tmp_root = tempfile.mkdtemp(prefix="pdfshare-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_tmp_root, 'app.db')}"
os.environ["UPLOAD_DIR"] = os.path.join(_tmp_root, "uploads")
os.environ["FILE_STORAGE_PROVIDER"] = "local"
os.environ["FRONTEND_URL"] = "http://frontend.test/"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from pdfshare.core.dependencies import get_db, get_public_comment_rate_limiter
from pdfshare.core.rate_limit import InMemoryRateLimitStore, RateLimiter
from pdfshare.core.security import get_password_hash
from pdfshare.main import app
from pdfshare.models import Base, Document, User
from pdfshare.services.file_service import LocalFileStorage, get_file_storage


SAMPLE_PDF = b"""%PDF-1.4
1 0 obj
<< /Type /Catalog /Pages 2 0 R >>
endobj
2 0 obj
<< /Type /Pages /Kids [3 0 R] /Count 1 >>
endobj
3 0 obj
<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] >>
endobj
trailer
<< /Root 1 0 R >>
%%EOF
"""


class FakeClock:
    """Controllable UTC clock for expiry tests."""

    def __init__(self, start=None):
        self.now = start or datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now = self.now + timedelta(**kwargs)


class FakeMonotonic:
    def __init__(self):
        self.value = 1000.0

    def __call__(self):
        return self.value

    def advance(self, seconds):
        self.value += seconds


@pytest.fixture
def engine(tmp_path):
    test_engine = create_engine(
        f"sqlite:///{tmp_path / 'test.db'}",
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(bind=test_engine)
    yield test_engine
    Base.metadata.drop_all(bind=test_engine)
    test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def storage(tmp_path):
    return LocalFileStorage(str(tmp_path / "uploads"))


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def rate_clock():
    return FakeMonotonic()


@pytest.fixture
def rate_limiter(rate_clock):
    return RateLimiter(InMemoryRateLimitStore(clock=rate_clock), name="PublicComment", limit=5, window_seconds=60)


@pytest.fixture
def client(session_factory, storage, rate_limiter):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_file_storage] = lambda: storage
    app.dependency_overrides[get_public_comment_rate_limiter] = lambda: rate_limiter
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


# Service-level helpers

def make_user(db, email="owner@example.com", full_name="Owner"):
    user = User(
        email=email,
        username=email.split("@")[0],
        full_name=full_name,
        hashed_password=get_password_hash("secret123"),
        is_active=True,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def make_document(db, owner, filename="doc.pdf"):
    document = Document(
        filename=filename,
        file_path=f"key_{filename}",
        file_size=len(SAMPLE_PDF),
        content_type="application/pdf",
        owner_id=owner.id,
    )
    db.add(document)
    db.commit()
    db.refresh(document)
    return document


@pytest.fixture
def owner(db):
    return make_user(db)


@pytest.fixture
def document(db, owner):
    return make_document(db, owner)


# HTTP helpers

def register_and_login(client, email="owner@example.com", password="secret123"):
    response = client.post(
        "/api/auth/register",
        json={"email": email, "username": email.split("@")[0], "full_name": "Test User", "password": password},
    )
    assert response.status_code == 201, response.text
    response = client.post("/api/auth/login", data={"username": email, "password": password})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


def upload_pdf(client, headers, data=SAMPLE_PDF, filename="doc.pdf", content_type="application/pdf"):
    return client.post(
        "/api/documents",
        headers=headers,
        files={"file": (filename, data, content_type)},
    )


@pytest.fixture
def auth_headers(client):
    return register_and_login(client)


@pytest.fixture
def uploaded(client, auth_headers):
    response = upload_pdf(client, auth_headers)
    assert response.status_code == 201, response.text
    return response.json()


@pytest.fixture
def share_token(client, auth_headers, uploaded):
    response = client.post(f"/api/documents/{uploaded['id']}/share", headers=auth_headers)
    assert response.status_code == 200, response.text
    return response.json()["token"]
