import os
from mimetypes import guess_type
from uuid import UUID

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from fastapi.responses import FileResponse
from sqlalchemy.orm import Session

from app.api.auth import get_current_actor
from app.api.errors import unwrap
from app.core.config import UploadPolicy, get_upload_policy
from app.core.permissions import require_roles
from app.core.roles import Actor, ROLE_LECTURER
from app.db.session import get_db
from app.schemas.document import DocumentOut
from app.services import document_service
from app.services.storage import BlobStore, get_blob_store

# main.py mounts this router with prefix="/api/documents"
router = APIRouter(tags=["documents"])


# -------------------------------------------------------------------
# UPLOAD SUPPORTING DOCUMENT
# POST /api/documents/claims/{claim_id}
# form-data key: file
# -------------------------------------------------------------------
@router.post(
    "/claims/{claim_id}",
    response_model=DocumentOut,
    status_code=status.HTTP_201_CREATED,
)
def upload_document(
    claim_id: UUID,
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_roles([ROLE_LECTURER])),
    policy: UploadPolicy = Depends(get_upload_policy),
    blob_store: BlobStore = Depends(get_blob_store),
):
    # one byte past the limit is enough to know the file is too large
    data = file.file.read(policy.max_bytes + 1)

    return unwrap(
        document_service.upload_document(
            db,
            claim_id,
            actor,
            file_name=file.filename,
            content_type=file.content_type,
            data=data,
            policy=policy,
            blob_store=blob_store,
        )
    )


@router.get("/{document_id}/file")
def get_document_file(
    document_id: UUID,
    inline: bool = False,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
    blob_store: BlobStore = Depends(get_blob_store),
):
    document = unwrap(document_service.get_document(db, document_id, actor))

    path = blob_store.path_for(document.storage_path)
    if not os.path.exists(path):
        raise HTTPException(status_code=404, detail="File not found on server")

    media_type, _ = guess_type(document.file_name)
    media_type = media_type or document.content_type or "application/octet-stream"

    return FileResponse(
        path=path,
        media_type=media_type,
        filename=document.file_name,
        content_disposition_type="inline" if inline else "attachment",
    )


@router.delete("/{document_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_document(
    document_id: UUID,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_roles([ROLE_LECTURER])),
    blob_store: BlobStore = Depends(get_blob_store),
):
    unwrap(document_service.remove_document(db, document_id, actor, blob_store))
    return None
