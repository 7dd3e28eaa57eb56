from fastapi import HTTPException, Request, status

from app.core.service import EntityLimitService


def get_limit_service(request: Request) -> EntityLimitService:
    """
    The service object built at startup (see app.main lifespan).
    """
    service = getattr(request.app.state, "limit_service", None)
    if service is None or not service.started:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail={"code": "service_unavailable", "message": "Entity limit service is not running."},
        )
    return service
