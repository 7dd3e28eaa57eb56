from __future__ import annotations

from fastapi import HTTPException, status

from app.core.errors import (
    CategoryNotFoundError,
    EntityLimitError,
    InvalidTierNameError,
    PersistenceError,
    TierAlreadyExistsError,
    TierNotFoundError,
)

STATUS_BY_ERROR: dict[type[EntityLimitError], int] = {
    TierNotFoundError: status.HTTP_404_NOT_FOUND,
    CategoryNotFoundError: status.HTTP_404_NOT_FOUND,
    TierAlreadyExistsError: status.HTTP_409_CONFLICT,
    InvalidTierNameError: status.HTTP_422_UNPROCESSABLE_ENTITY,
    PersistenceError: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def to_http_exception(exc: EntityLimitError) -> HTTPException:
    return HTTPException(
        status_code=STATUS_BY_ERROR.get(type(exc), status.HTTP_400_BAD_REQUEST),
        detail={"code": exc.code, "message": exc.message},
    )
