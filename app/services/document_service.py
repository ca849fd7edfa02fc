import logging
import os
from datetime import datetime
from typing import Optional, Union

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.config import UploadPolicy
from app.core.roles import Actor
from app.models.supporting_document import SupportingDocument
from app.services.claim_service import can_view, editable_claim
from app.services.outcomes import (
    Failure,
    Forbidden,
    NotFound,
    StorageFailure,
    ValidationFailed,
)
from app.services.storage import BlobStore

logger = logging.getLogger(__name__)


def check_upload(
    file_name: Optional[str],
    size_bytes: int,
    policy: UploadPolicy,
) -> Optional[ValidationFailed]:
    errors = {}
    if not file_name or size_bytes == 0:
        errors.setdefault("file", []).append("Please choose a file.")
    else:
        ext = os.path.splitext(file_name)[1].lower()
        if not policy.allows_extension(ext):
            allowed = ", ".join(sorted(policy.allowed_extensions))
            errors.setdefault("file", []).append(
                f"Unsupported file type '{ext or file_name}'. Allowed: {allowed}."
            )
        if size_bytes > policy.max_bytes:
            errors.setdefault("file", []).append(
                f"File is larger than the {policy.max_bytes} byte limit."
            )
    return ValidationFailed(errors) if errors else None


def upload_document(
    db: Session,
    claim_id,
    actor: Actor,
    file_name: Optional[str],
    content_type: Optional[str],
    data: bytes,
    policy: UploadPolicy,
    blob_store: BlobStore,
) -> Union[SupportingDocument, Failure]:
    claim = editable_claim(db, claim_id, actor)
    if isinstance(claim, Failure):
        return claim

    invalid = check_upload(file_name, len(data), policy)
    if invalid:
        return invalid

    try:
        handle = blob_store.store(data, file_name)
    except OSError:
        logger.exception("upload failed for claim=%s", claim_id)
        return StorageFailure("Upload failed. Please try again or contact support.")

    document = SupportingDocument(
        claim_id=claim.id,
        file_name=os.path.basename(file_name),
        content_type=content_type or "application/octet-stream",
        size_bytes=len(data),
        storage_path=handle,
        uploaded_at=datetime.utcnow(),
    )
    db.add(document)

    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("document metadata not saved for claim=%s", claim_id)
        # no metadata row, so the file would be unreachable
        try:
            blob_store.delete(handle)
        except OSError:
            logger.warning("orphaned upload %s left in blob store", handle, exc_info=True)
        return StorageFailure("Upload failed. Please try again or contact support.")

    db.refresh(document)
    logger.info(
        "document=%s (%s bytes) uploaded to claim=%s",
        document.id, document.size_bytes, claim_id,
    )
    return document


def get_document(db: Session, document_id, actor: Actor) -> Union[SupportingDocument, Failure]:
    document = db.query(SupportingDocument).filter(SupportingDocument.id == document_id).first()
    if not document:
        return NotFound("Document", str(document_id))
    if not can_view(actor, document.claim):
        return Forbidden("You are not allowed to view this document.")
    return document


def remove_document(
    db: Session,
    document_id,
    actor: Actor,
    blob_store: BlobStore,
) -> Union[SupportingDocument, Failure]:
    document = db.query(SupportingDocument).filter(SupportingDocument.id == document_id).first()
    if not document:
        return NotFound("Document", str(document_id))

    claim = editable_claim(db, document.claim_id, actor)
    if isinstance(claim, Failure):
        return claim

    handle = document.storage_path
    db.delete(document)
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("failed to delete document=%s", document_id)
        return StorageFailure()

    try:
        blob_store.delete(handle)
    except OSError:
        logger.warning("could not remove file %s", handle, exc_info=True)

    return document
