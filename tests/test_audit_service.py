from datetime import datetime

from app.models.claim import ClaimStatus
from app.services import audit_service

S = ClaimStatus


def test_history_is_newest_first(db, make_claim):
    claim = make_claim(status=S.submitted)

    audit_service.record_transition(
        db, claim, S.draft, S.submitted, "lec-1", datetime(2025, 10, 1, 9, 0)
    )
    audit_service.record_transition(
        db, claim, S.submitted, S.under_review, "coord-1", datetime(2025, 10, 3, 9, 0)
    )
    audit_service.record_transition(
        db, claim, S.under_review, S.manager_approved, "mgr-1", datetime(2025, 10, 2, 9, 0)
    )
    db.commit()

    history = audit_service.history_for(db, claim.id)
    assert [h.changed_at.day for h in history] == [3, 2, 1]


def test_same_timestamp_falls_back_to_insertion_order(db, make_claim):
    claim = make_claim(status=S.submitted)
    when = datetime(2025, 10, 1, 9, 0)

    audit_service.record_transition(db, claim, S.draft, S.submitted, "lec-1", when)
    db.flush()
    audit_service.record_transition(db, claim, S.submitted, S.draft, "lec-1", when)
    db.commit()

    history = audit_service.history_for(db, claim.id)
    assert [(h.from_status, h.to_status) for h in history] == [
        (S.submitted, S.draft),
        (S.draft, S.submitted),
    ]


def test_record_transition_does_not_commit(db, make_claim):
    claim = make_claim(status=S.draft)

    audit_service.record_transition(
        db, claim, S.draft, S.submitted, None, datetime(2025, 10, 1)
    )
    db.rollback()

    assert audit_service.history_count(db, claim.id) == 0


def test_history_for_other_claims_is_empty(db, make_claim):
    first = make_claim(status=S.draft)
    second = make_claim(status=S.draft)

    audit_service.record_transition(db, first, S.draft, S.submitted, None, datetime(2025, 10, 1))
    db.commit()

    assert audit_service.history_for(db, second.id) == []
    assert audit_service.history_for(db, first.id)[0].changed_by is None
