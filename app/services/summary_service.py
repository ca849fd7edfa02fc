from collections import OrderedDict
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.orm import Session, selectinload

from app.core.roles import Actor
from app.models.claim import Claim, ClaimStatus
from app.services import transitions

APPROVED = ClaimStatus.manager_approved
REJECTED = ClaimStatus.manager_rejected


def lecturer_dashboard(db: Session, actor: Actor) -> dict:
    claims = (
        db.query(Claim)
        .options(selectinload(Claim.line_items))
        .filter(Claim.lecturer_user_id == actor.user_id)
        .all()
    )

    totals = {
        "claim_count": len(claims),
        "total_hours": Decimal("0"),
        "total_amount": Decimal("0"),
        "approved_amount": Decimal("0"),
        "pending_amount": Decimal("0"),
        "rejected_amount": Decimal("0"),
    }
    for claim in claims:
        amount = claim.total_amount
        totals["total_hours"] += claim.total_hours
        totals["total_amount"] += amount
        if claim.status == APPROVED:
            totals["approved_amount"] += amount
        elif claim.status == REJECTED:
            totals["rejected_amount"] += amount
        elif claim.status != ClaimStatus.draft and not transitions.is_terminal(claim.status):
            totals["pending_amount"] += amount
    return totals


def _approved_claims(db: Session):
    return (
        db.query(Claim)
        .options(selectinload(Claim.line_items))
        .filter(Claim.status == APPROVED)
    )


def hr_summary(db: Session, year: Optional[int] = None, month: Optional[int] = None) -> dict:
    """Approved claims grouped by lecturer and period."""
    query = _approved_claims(db)
    if year is not None:
        query = query.filter(Claim.year == year)
    if month is not None:
        query = query.filter(Claim.month == month)

    groups = OrderedDict()
    for claim in query.all():
        key = (claim.lecturer_name, claim.year, claim.month)
        row = groups.setdefault(key, {
            "lecturer_name": claim.lecturer_name,
            "year": claim.year,
            "month": claim.month,
            "claim_count": 0,
            "total_hours": Decimal("0"),
            "total_amount": Decimal("0"),
        })
        row["claim_count"] += 1
        row["total_hours"] += claim.total_hours
        row["total_amount"] += claim.total_amount

    rows = [groups[key] for key in sorted(groups)]
    years = [y for (y,) in db.query(Claim.year).distinct().order_by(Claim.year).all()]

    return {
        "selected_year": year,
        "selected_month": month,
        "years": years,
        "rows": rows,
    }


def hr_detail(db: Session, lecturer_name: str, year: int, month: int) -> Optional[dict]:
    claims: List[Claim] = (
        _approved_claims(db)
        .filter(
            Claim.lecturer_name == lecturer_name,
            Claim.year == year,
            Claim.month == month,
        )
        .order_by(Claim.submitted_at)
        .all()
    )
    if not claims:
        return None

    return {
        "lecturer_name": lecturer_name,
        "year": year,
        "month": month,
        "total_hours": sum((c.total_hours for c in claims), Decimal("0")),
        "total_amount": sum((c.total_amount for c in claims), Decimal("0")),
        "claims": claims,
    }
