from contextlib import asynccontextmanager

from fastapi import FastAPI

from app.core.config import Settings, settings
from app.core.logging_config import setup_logging
from app.core.registry import JsonGameRegistry
from app.core.service import EntityLimitService
from app.crud.limit_documents import SqlLimitRepository
from app.crud.permission_grants import SqlAuthorizer
from app.crud.placed_entities import SqlWorldState
from app.crud.team_membership import SqlTeamProvider
from app.db.session import SessionLocal
import app.models  # noqa: F401  # force model registration

from app.api.v1.limits import router as limits_router
from app.api.v1.tiers import router as tiers_router


def build_default_service(cfg: Settings) -> EntityLimitService:
    """
    Service wired to the SQL reference adapters. Clan pooling needs a plugin
    host, which only an embedding host can provide.
    """
    return EntityLimitService(
        cfg,
        repository=SqlLimitRepository(SessionLocal),
        registry=JsonGameRegistry(cfg.GAME_REGISTRY_DIR),
        authorizer=SqlAuthorizer(SessionLocal),
        world=SqlWorldState(SessionLocal),
        teams=SqlTeamProvider(SessionLocal),
        plugin_host=None,
    )


def create_application(service: EntityLimitService | None = None) -> FastAPI:
    setup_logging(settings.LOG_LEVEL)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        limit_service = service
        if limit_service is None:
            # schema is managed by Alembic: `alembic upgrade head` from backend/
            limit_service = build_default_service(settings)
        limit_service.start()
        app.state.limit_service = limit_service
        try:
            yield
        finally:
            limit_service.shutdown()
            app.state.limit_service = None

    app = FastAPI(title="Entity Limit API", lifespan=lifespan)

    @app.get("/")
    def root():
        return {"status": "ok", "service": "entity-limits"}

    # Routers
    app.include_router(limits_router, prefix="/api/v1")
    app.include_router(tiers_router, prefix="/api/v1")

    return app


app = create_application()
