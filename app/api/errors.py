from fastapi import HTTPException

from app.services.outcomes import Failure


def unwrap(result):
    """Return a successful service result, or raise the matching HTTP error."""
    if isinstance(result, Failure):
        raise HTTPException(status_code=result.status_code, detail=result.detail())
    return result
