import os

os.environ.setdefault("AUTO_CREATE_TABLES", "false")

from datetime import date
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.config import UploadPolicy, get_upload_policy
from app.core.roles import Actor, Role
from app.core.security import create_access_token
from app.db.base import Base, import_models
from app.db.session import get_db, make_engine
from app.main import app
from app.models.claim import Claim, ClaimStatus
from app.models.claim_line_item import ClaimLineItem
from app.services.storage import LocalBlobStore, get_blob_store

import_models()

LECTURER = Actor("lec-1", frozenset({Role.lecturer}), "Ada Lovelace")
OTHER_LECTURER = Actor("lec-2", frozenset({Role.lecturer}), "Alan Turing")
COORDINATOR = Actor("coord-1", frozenset({Role.coordinator}), "Grace Hopper")
MANAGER = Actor("mgr-1", frozenset({Role.manager}), "Edsger Dijkstra")
HR = Actor("hr-1", frozenset({Role.hr}), "Barbara Liskov")

TEST_POLICY = UploadPolicy(
    allowed_extensions=frozenset({".pdf", ".docx", ".xlsx"}),
    max_bytes=10 * 1024 * 1024,
)


@pytest.fixture
def engine():
    eng = make_engine("sqlite://", poolclass=StaticPool)
    Base.metadata.create_all(bind=eng)
    yield eng
    Base.metadata.drop_all(bind=eng)
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def blob_store(tmp_path):
    return LocalBlobStore(str(tmp_path / "uploads"))


@pytest.fixture
def client(session_factory, blob_store):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_blob_store] = lambda: blob_store
    app.dependency_overrides[get_upload_policy] = lambda: TEST_POLICY
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def auth_headers(actor: Actor) -> dict:
    token = create_access_token(actor.user_id, actor.roles, name=actor.name)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def make_claim(db):
    def _make(
        lecturer: Actor = LECTURER,
        status: ClaimStatus = ClaimStatus.draft,
        year: int = 2025,
        month: int = 10,
        items=(),
        lecturer_name=None,
    ) -> Claim:
        claim = Claim(
            lecturer_user_id=lecturer.user_id,
            lecturer_name=lecturer_name or lecturer.name,
            module_code="PROG6212",
            year=year,
            month=month,
            status=status,
        )
        for position, (hours, rate) in enumerate(items, start=1):
            claim.line_items.append(
                ClaimLineItem(
                    position=position,
                    date=date(year, month, 1),
                    hours=Decimal(str(hours)),
                    rate_per_hour=Decimal(str(rate)),
                )
            )
        db.add(claim)
        db.commit()
        db.refresh(claim)
        return claim

    return _make
