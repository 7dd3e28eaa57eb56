from __future__ import annotations

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.config import Settings
from app.core.providers import (
    InMemoryAuthorizer,
    InMemoryLimitRepository,
    InMemoryRegistry,
    InMemoryTeams,
    InMemoryWorld,
)
from app.core.security import create_access_token
from app.core.service import EntityLimitService
from app.core.tier import DefaultTier

# Ensure Base + models are registered before create_all
from app.db.base import Base
import app.models  # noqa: F401

from tests.constants import OPERATOR_ID, PLAYER_ID, make_registry


# ---------------------------------------------------------
# Collaborators
# ---------------------------------------------------------
@pytest.fixture()
def registry() -> InMemoryRegistry:
    return make_registry()


@pytest.fixture()
def repository() -> InMemoryLimitRepository:
    return InMemoryLimitRepository()


@pytest.fixture()
def world() -> InMemoryWorld:
    return InMemoryWorld()


@pytest.fixture()
def teams() -> InMemoryTeams:
    return InMemoryTeams()


@pytest.fixture()
def authorizer() -> InMemoryAuthorizer:
    return InMemoryAuthorizer()


@pytest.fixture()
def settings() -> Settings:
    return Settings(
        _env_file=None,
        AUTO_FILL_ENTITIES=True,
        USE_TEAM_POOLING=False,
        USE_CLAN_POOLING=False,
    )


@pytest.fixture()
def service(settings, repository, registry, authorizer, world, teams) -> EntityLimitService:
    svc = EntityLimitService(
        settings,
        repository=repository,
        registry=registry,
        authorizer=authorizer,
        world=world,
        teams=teams,
    )
    svc.start()
    yield svc
    svc.shutdown()


@pytest.fixture()
def player(authorizer) -> int:
    authorizer.grant(PLAYER_ID, DefaultTier.DEFAULT.value)
    return PLAYER_ID


# ---------------------------------------------------------
# SQL adapters (in-memory SQLite shared across connections)
# ---------------------------------------------------------
@pytest.fixture()
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    factory = sessionmaker(bind=engine, expire_on_commit=False)
    yield factory
    Base.metadata.drop_all(engine)
    engine.dispose()


# ---------------------------------------------------------
# FastAPI app wired to the in-memory service
# ---------------------------------------------------------
@pytest.fixture()
def app(settings, repository, registry, authorizer, world, teams):
    from app.main import create_application

    svc = EntityLimitService(
        settings,
        repository=repository,
        registry=registry,
        authorizer=authorizer,
        world=world,
        teams=teams,
    )
    return create_application(svc)


@pytest_asyncio.fixture()
async def client(app):
    transport = ASGITransport(app=app)
    async with app.router.lifespan_context(app):
        async with AsyncClient(
            transport=transport,
            base_url="http://test",
        ) as ac:
            yield ac


@pytest.fixture()
def operator_headers(authorizer) -> dict[str, str]:
    authorizer.grant(OPERATOR_ID, "advancedentitylimit.admin")
    return {"Authorization": f"Bearer {create_access_token(OPERATOR_ID)}"}


@pytest.fixture()
def host_headers() -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(None)}"}
