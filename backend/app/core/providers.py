# app/core/providers.py
"""
Contracts the limit engine expects from the host, plus in-memory implementations.

The host (game server, admin tooling, tests) supplies:
- a repository for the persisted limit document
- the live world state and team membership
- an authorizer answering "does user U hold capability C"
- a plugin host to locate an external clans plugin
- the item / prefab registries the catalog is built from

All calls are synchronous and expected to be cheap, except the world scan.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Optional, Protocol

from app.core.tier_limits import Tier


@dataclass(frozen=True)
class LiveEntity:
    owner_id: int
    prefab_name: str


@dataclass(frozen=True)
class DeployableItem:
    item_id: int
    # prefab path of the entity the item deploys, None when not deployable
    deploys_prefab: Optional[str] = None


@dataclass(frozen=True)
class StructurePrefab:
    prefab_name: str
    is_building_block: bool = False


class LimitRepository(Protocol):
    def load(self) -> dict[str, Tier]: ...

    def save(self, tiers: dict[str, Tier]) -> None: ...


class WorldStateProvider(Protocol):
    def iter_live_entities(self) -> Iterable[LiveEntity]: ...


class TeamProvider(Protocol):
    def team_members(self, user_id: int) -> Optional[list[int]]: ...


class Authorizer(Protocol):
    def has_capability(self, user_id: int, capability: str) -> bool: ...


class Plugin(Protocol):
    author: str

    def call(self, hook: str, *args: Any) -> Any: ...


class PluginHost(Protocol):
    def plugins(self) -> Iterable[Plugin]: ...


class GameRegistry(Protocol):
    def deployable_items(self) -> Iterable[DeployableItem]: ...

    def structure_prefabs(self) -> Iterable[StructurePrefab]: ...


# ---------------------------------------------------------
# In-memory implementations
# ---------------------------------------------------------
class InMemoryLimitRepository:
    def __init__(self, tiers: Optional[dict[str, Tier]] = None):
        self.document: dict[str, Tier] = dict(tiers or {})
        self.saves = 0

    def load(self) -> dict[str, Tier]:
        return dict(self.document)

    def save(self, tiers: dict[str, Tier]) -> None:
        self.document = dict(tiers)
        self.saves += 1


class InMemoryWorld:
    def __init__(self, entities: Iterable[LiveEntity] = ()):
        self.entities: list[LiveEntity] = list(entities)

    def place(self, owner_id: int, prefab_name: str) -> LiveEntity:
        entity = LiveEntity(owner_id=owner_id, prefab_name=prefab_name)
        self.entities.append(entity)
        return entity

    def remove(self, entity: LiveEntity) -> None:
        self.entities.remove(entity)

    def iter_live_entities(self) -> Iterable[LiveEntity]:
        return list(self.entities)


class InMemoryTeams:
    def __init__(self, teams: Iterable[Iterable[int]] = ()):
        self._by_user: dict[int, list[int]] = {}
        for team in teams:
            members = list(team)
            for member in members:
                self._by_user[member] = members

    def team_members(self, user_id: int) -> Optional[list[int]]:
        return self._by_user.get(user_id)


@dataclass
class InMemoryAuthorizer:
    grants: dict[int, set[str]] = field(default_factory=dict)

    def grant(self, user_id: int, *capabilities: str) -> None:
        self.grants.setdefault(user_id, set()).update(capabilities)

    def has_capability(self, user_id: int, capability: str) -> bool:
        return capability in self.grants.get(user_id, set())


class InMemoryPluginHost:
    def __init__(self, plugins: Iterable[Plugin] = ()):
        self._plugins = list(plugins)
        self.lookups = 0

    def plugins(self) -> Iterable[Plugin]:
        self.lookups += 1
        return list(self._plugins)


@dataclass
class InMemoryRegistry:
    items: list[DeployableItem] = field(default_factory=list)
    prefabs: list[StructurePrefab] = field(default_factory=list)

    def deployable_items(self) -> Iterable[DeployableItem]:
        return list(self.items)

    def structure_prefabs(self) -> Iterable[StructurePrefab]:
        return list(self.prefabs)
