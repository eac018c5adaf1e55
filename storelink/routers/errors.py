from fastapi import HTTPException

from storelink.core.errors import (
    ActionInProgressError,
    EntityNotFoundError,
    PreconditionFailed,
    StoreLinkError,
    ValidationFailed,
)


def http_error(exc: StoreLinkError) -> HTTPException:
    """Map a service-layer error to the HTTP response the routers return."""
    if isinstance(exc, EntityNotFoundError):
        return HTTPException(status_code=404, detail=str(exc))
    if isinstance(exc, ValidationFailed):
        return HTTPException(status_code=400, detail=exc.errors)
    if isinstance(exc, (PreconditionFailed, ActionInProgressError)):
        return HTTPException(status_code=409, detail=str(exc))
    return HTTPException(status_code=500, detail=str(exc))


__all__ = ["http_error"]
