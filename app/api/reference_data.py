from fastapi import APIRouter, Depends

from app.core.config import UploadPolicy, get_upload_policy
from app.core.roles import Role
from app.models.claim import ClaimStatus, LegacyStatus

router = APIRouter(prefix="/reference-data", tags=["Reference Data"])


@router.get("")
def get_reference_data(policy: UploadPolicy = Depends(get_upload_policy)):
    return {
        "statuses": [s.value for s in ClaimStatus],
        "legacy_statuses": [s.value for s in LegacyStatus],
        "roles": [r.value for r in Role],
        "upload": {
            "allowed_extensions": sorted(policy.allowed_extensions),
            "max_bytes": policy.max_bytes,
        },
    }
