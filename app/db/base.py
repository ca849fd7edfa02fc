# app/db/base.py

from sqlalchemy.orm import declarative_base

Base = declarative_base()


def import_models():
    """Register every mapped class on Base.metadata."""
    from app.models import claim, claim_line_item, supporting_document, claim_status_history  # noqa: F401
