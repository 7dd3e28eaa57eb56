# app/core/groups.py
"""
Pooling of placements across a team and, optionally, a clan.

Clans live in an external plugin. Two plugin authors are supported; both
answer the same two hooks:
    GetClanOf(user_id)      -> clan tag or None
    GetClanMembers(user_id) -> list of member ids as strings
The plugin is looked up by author once and cached for the aggregator's
lifetime. Any failure talking to it disables clan pooling for that call.
"""
from __future__ import annotations

import logging
from typing import Iterable, Optional, Protocol

from app.core.config import ClanProviderName
from app.core.providers import Plugin, PluginHost, TeamProvider

logger = logging.getLogger(__name__)


class ClanProvider(Protocol):
    def is_member(self, user_id: int) -> bool: ...

    def members_of(self, user_id: int) -> set[int]: ...


def parse_member_ids(raw: Optional[Iterable[object]]) -> set[int]:
    members: set[int] = set()
    for value in raw or ():
        try:
            members.add(int(str(value).strip()))
        except ValueError:
            logger.debug("Skipping unparsable clan member id %r", value)
    return members


class _PluginClanProvider:
    """Clan provider speaking the GetClanOf / GetClanMembers hooks."""

    author: str = ""

    def __init__(self, plugin: Plugin):
        self.plugin = plugin

    def is_member(self, user_id: int) -> bool:
        return self.plugin.call("GetClanOf", user_id) is not None

    def members_of(self, user_id: int) -> set[int]:
        return parse_member_ids(self.plugin.call("GetClanMembers", user_id))


class MeventClanProvider(_PluginClanProvider):
    author = ClanProviderName.MEVENT.value


class K1lly0uClanProvider(_PluginClanProvider):
    author = ClanProviderName.K1LLY0U.value


CLAN_PROVIDERS: dict[ClanProviderName, type[_PluginClanProvider]] = {
    ClanProviderName.MEVENT: MeventClanProvider,
    ClanProviderName.K1LLY0U: K1lly0uClanProvider,
}


def find_clan_provider(host: Optional[PluginHost], selected: ClanProviderName) -> Optional[ClanProvider]:
    """Locate the configured clans plugin by author. None when it is not loaded."""
    if host is None:
        return None

    provider_cls = CLAN_PROVIDERS[selected]
    try:
        plugin = next((p for p in host.plugins() if getattr(p, "author", None) == provider_cls.author), None)
    except Exception:
        logger.exception("Clan plugin lookup failed; clan pooling disabled")
        return None

    if plugin is None:
        logger.info("Clan plugin by %s not found; clan pooling disabled", provider_cls.author)
        return None
    return provider_cls(plugin)


class GroupAggregator:
    def __init__(
        self,
        teams: Optional[TeamProvider] = None,
        plugin_host: Optional[PluginHost] = None,
        *,
        use_teams: bool = False,
        use_clans: bool = False,
        clan_provider: ClanProviderName = ClanProviderName.MEVENT,
    ):
        self.teams = teams
        self.plugin_host = plugin_host
        self.use_teams = use_teams
        self.use_clans = use_clans
        self.clan_provider_name = clan_provider

        self._clan_provider: Optional[ClanProvider] = None
        self._clan_checked = False

    @property
    def clan_provider(self) -> Optional[ClanProvider]:
        if not self._clan_checked:
            self._clan_provider = find_clan_provider(self.plugin_host, self.clan_provider_name)
            self._clan_checked = True
        return self._clan_provider

    def _team_members(self, user_id: int) -> set[int]:
        if not self.use_teams or self.teams is None:
            return set()
        return set(self.teams.team_members(user_id) or ())

    def _clan_members(self, user_id: int) -> set[int]:
        if not self.use_clans:
            return set()

        provider = self.clan_provider
        if provider is None:
            return set()

        try:
            if not provider.is_member(user_id):
                return set()
            return provider.members_of(user_id)
        except Exception:
            logger.warning("Clan plugin call failed for %s; ignoring clan pooling", user_id, exc_info=True)
            return set()

    def resolve_pool(self, user_id: int) -> set[int]:
        """Users whose placements count against `user_id`'s quota, always including the user."""
        pool = {user_id}
        pool |= self._team_members(user_id)
        pool |= self._clan_members(user_id)
        return pool
