from app.models.claim import ClaimStatus
from app.models.supporting_document import SupportingDocument
from tests.conftest import COORDINATOR, HR, LECTURER, MANAGER, OTHER_LECTURER, auth_headers

S = ClaimStatus
KIB = 1024


def create_claim(client, actor=LECTURER, **overrides):
    body = {"module_code": "PROG6212", "year": 2025, "month": 10}
    body.update(overrides)
    response = client.post("/api/claims", json=body, headers=auth_headers(actor))
    assert response.status_code == 201, response.text
    return response.json()


def transition(client, claim_id, actor, status):
    return client.post(
        f"/api/claims/{claim_id}/transitions",
        json={"status": status},
        headers=auth_headers(actor),
    )


def test_health(client):
    assert client.get("/api/health").json() == {"status": "ok"}


def test_requests_need_a_valid_token(client):
    assert client.get("/api/claims").status_code in (401, 403)
    response = client.get("/api/claims", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401


def test_me_reports_roles(client):
    response = client.get("/api/auth/me", headers=auth_headers(COORDINATOR))
    assert response.json() == {
        "id": "coord-1",
        "name": "Grace Hopper",
        "roles": ["ProgrammeCoordinator"],
    }


def test_full_workflow_over_http(client):
    claim = create_claim(client)
    claim_id = claim["id"]
    assert claim["status"] == "Draft"
    assert claim["lecturer_name"] == "Ada Lovelace"

    response = client.post(
        f"/api/claims/{claim_id}/items",
        json={"date": "2025-10-06", "hours": 3, "rate_per_hour": "20.00"},
        headers=auth_headers(LECTURER),
    )
    assert response.status_code == 201
    assert response.json()["amount"] == 60

    response = client.post(
        f"/api/documents/claims/{claim_id}",
        files={"file": ("timesheet.pdf", b"x" * KIB, "application/pdf")},
        headers=auth_headers(LECTURER),
    )
    assert response.status_code == 201, response.text
    assert response.json()["size_bytes"] == KIB

    assert transition(client, claim_id, LECTURER, "Submitted").status_code == 200
    assert transition(client, claim_id, COORDINATOR, "UnderReview").status_code == 200

    queue = client.get("/api/claims/review-queue", headers=auth_headers(MANAGER)).json()
    assert [c["id"] for c in queue] == [claim_id]

    # legacy alias maps to the manager decision
    response = transition(client, claim_id, MANAGER, "Approved")
    assert response.status_code == 200
    body = response.json()
    assert body["from_status"] == "UnderReview"
    assert body["to_status"] == "ManagerApproved"
    assert body["legacy_status"] == "Approved"

    detail = client.get(f"/api/claims/{claim_id}", headers=auth_headers(LECTURER)).json()
    assert detail["status"] == "ManagerApproved"
    assert detail["legacy_status"] == "Approved"
    assert detail["manager_user_id"] == "mgr-1"
    assert detail["reviewed_at"] is not None
    assert detail["total_amount"] == 60
    assert [h["to_status"] for h in detail["history"]] == [
        "ManagerApproved", "UnderReview", "Submitted",
    ]
    assert detail["allowed_transitions"] == []

    summary = client.get("/api/hr/summary", headers=auth_headers(HR)).json()
    assert summary["rows"][0]["total_amount"] == 60

    pdf = client.get(
        "/api/hr/details/pdf",
        params={"lecturer": "Ada Lovelace", "year": 2025, "month": 10},
        headers=auth_headers(MANAGER),
    )
    assert pdf.status_code == 200
    assert pdf.headers["content-type"] == "application/pdf"


def test_forbidden_transition_returns_context(client):
    claim_id = create_claim(client)["id"]

    response = transition(client, claim_id, MANAGER, "ManagerApproved")

    assert response.status_code == 403
    detail = response.json()["detail"]
    assert detail["from_status"] == "Draft"
    assert detail["to_status"] == "ManagerApproved"
    assert detail["actor_roles"] == ["AcademicManager"]

    history = client.get(f"/api/claims/{claim_id}/history", headers=auth_headers(LECTURER))
    assert history.json() == []


def test_unknown_status_is_a_validation_error(client):
    claim_id = create_claim(client)["id"]
    response = transition(client, claim_id, LECTURER, "Paid")
    assert response.status_code == 422
    assert "status" in response.json()["detail"]["errors"]


def test_transition_on_missing_claim(client):
    response = transition(client, "00000000-0000-0000-0000-000000000000", MANAGER, "ManagerApproved")
    assert response.status_code == 404


def test_line_item_validation_errors_are_aggregated(client):
    claim_id = create_claim(client)["id"]

    response = client.post(
        f"/api/claims/{claim_id}/items",
        json={"hours": 30, "rate_per_hour": 100000},
        headers=auth_headers(LECTURER),
    )

    assert response.status_code == 422
    assert set(response.json()["detail"]["errors"]) == {"date", "hours", "rate_per_hour"}


def test_upload_rejections(client):
    claim_id = create_claim(client)["id"]

    exe = client.post(
        f"/api/documents/claims/{claim_id}",
        files={"file": ("tool.exe", b"MZ", "application/octet-stream")},
        headers=auth_headers(LECTURER),
    )
    assert exe.status_code == 422

    big = client.post(
        f"/api/documents/claims/{claim_id}",
        files={"file": ("big.pdf", b"x" * (15 * 1024 * 1024), "application/pdf")},
        headers=auth_headers(LECTURER),
    )
    assert big.status_code == 422


def test_document_download(client, db):
    claim_id = create_claim(client)["id"]
    uploaded = client.post(
        f"/api/documents/claims/{claim_id}",
        files={"file": ("notes.docx", b"hello", "application/octet-stream")},
        headers=auth_headers(LECTURER),
    ).json()

    response = client.get(
        f"/api/documents/{uploaded['id']}/file", headers=auth_headers(COORDINATOR)
    )
    assert response.status_code == 200
    assert response.content == b"hello"

    denied = client.get(
        f"/api/documents/{uploaded['id']}/file", headers=auth_headers(OTHER_LECTURER)
    )
    assert denied.status_code == 403

    assert db.query(SupportingDocument).one().storage_path


def test_document_download_with_non_ascii_name(client):
    claim_id = create_claim(client)["id"]
    uploaded = client.post(
        f"/api/documents/claims/{claim_id}",
        files={"file": ("отчёт.pdf", b"%PDF-1.4", "application/pdf")},
        headers=auth_headers(LECTURER),
    )
    assert uploaded.status_code == 201, uploaded.text
    document_id = uploaded.json()["id"]

    response = client.get(
        f"/api/documents/{document_id}/file", headers=auth_headers(LECTURER)
    )
    assert response.status_code == 200
    assert response.content == b"%PDF-1.4"
    disposition = response.headers["content-disposition"]
    assert disposition.startswith("attachment; filename*=utf-8''")
    assert "%D0%BE" in disposition

    inline = client.get(
        f"/api/documents/{document_id}/file",
        params={"inline": True},
        headers=auth_headers(LECTURER),
    )
    assert inline.headers["content-disposition"].startswith("inline;")


def test_other_lecturers_cannot_see_claim(client):
    claim_id = create_claim(client)["id"]
    response = client.get(f"/api/claims/{claim_id}", headers=auth_headers(OTHER_LECTURER))
    assert response.status_code == 403


def test_role_gates(client):
    assert client.post(
        "/api/claims",
        json={"module_code": "X", "year": 2025, "month": 1},
        headers=auth_headers(MANAGER),
    ).status_code == 403
    assert client.get("/api/hr/summary", headers=auth_headers(LECTURER)).status_code == 403
    assert client.get("/api/claims/review-queue", headers=auth_headers(HR)).status_code == 403


def test_manager_deletes_claim(client):
    claim_id = create_claim(client)["id"]

    response = client.delete(f"/api/claims/{claim_id}", headers=auth_headers(MANAGER))
    assert response.status_code == 204

    missing = client.get(f"/api/claims/{claim_id}", headers=auth_headers(MANAGER))
    assert missing.status_code == 404


def test_reference_data_shows_policy(client):
    data = client.get("/api/reference-data").json()
    assert data["statuses"][0] == "Draft"
    assert "Approved" in data["legacy_statuses"]
    assert data["upload"]["allowed_extensions"] == [".docx", ".pdf", ".xlsx"]
    assert data["upload"]["max_bytes"] == 10 * 1024 * 1024
