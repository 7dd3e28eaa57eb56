# tests/test_groups.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from app.core.config import ClanProviderName
from app.core.groups import (
    GroupAggregator,
    K1lly0uClanProvider,
    MeventClanProvider,
    find_clan_provider,
    parse_member_ids,
)
from app.core.providers import InMemoryPluginHost, InMemoryTeams

A, B, C, D = 1, 2, 3, 4


@dataclass
class FakeClansPlugin:
    author: str
    clans: dict[int, list[str]] = field(default_factory=dict)
    calls: list[tuple] = field(default_factory=list)

    def call(self, hook: str, *args: Any) -> Any:
        self.calls.append((hook, *args))
        user_id = args[0]
        if hook == "GetClanOf":
            return "TAG" if user_id in self.clans else None
        if hook == "GetClanMembers":
            return self.clans.get(user_id)
        raise KeyError(hook)


class ExplodingPlugin:
    author = "Mevent"

    def call(self, hook: str, *args: Any) -> Any:
        raise RuntimeError("plugin crashed")


def test_pool_always_contains_user():
    assert GroupAggregator().resolve_pool(A) == {A}


def test_team_pooling():
    teams = InMemoryTeams([[A, B]])
    groups = GroupAggregator(teams, use_teams=True)

    assert groups.resolve_pool(A) == {A, B}
    assert groups.resolve_pool(C) == {C}


def test_team_pooling_disabled():
    groups = GroupAggregator(InMemoryTeams([[A, B]]), use_teams=False)
    assert groups.resolve_pool(A) == {A}


def test_team_and_clan_pools_union():
    plugin = FakeClansPlugin(author="Mevent", clans={A: [str(A), str(C), str(D)]})
    groups = GroupAggregator(
        InMemoryTeams([[A, B]]),
        InMemoryPluginHost([plugin]),
        use_teams=True,
        use_clans=True,
        clan_provider=ClanProviderName.MEVENT,
    )

    assert groups.resolve_pool(A) == {A, B, C, D}
    assert plugin.calls == [("GetClanOf", A), ("GetClanMembers", A)]


def test_user_not_in_clan_contributes_nothing():
    plugin = FakeClansPlugin(author="Mevent", clans={C: [str(C), str(D)]})
    groups = GroupAggregator(plugin_host=InMemoryPluginHost([plugin]), use_clans=True)

    assert groups.resolve_pool(A) == {A}
    assert plugin.calls == [("GetClanOf", A)]


def test_provider_selected_by_author():
    mevent = FakeClansPlugin(author="Mevent", clans={A: [str(B)]})
    killy = FakeClansPlugin(author="k1lly0u", clans={A: [str(C)]})
    host = InMemoryPluginHost([mevent, killy])

    assert isinstance(find_clan_provider(host, ClanProviderName.MEVENT), MeventClanProvider)
    assert isinstance(find_clan_provider(host, ClanProviderName.K1LLY0U), K1lly0uClanProvider)

    groups = GroupAggregator(plugin_host=host, use_clans=True, clan_provider=ClanProviderName.K1LLY0U)
    assert groups.resolve_pool(A) == {A, C}


def test_missing_plugin_disables_clan_pooling():
    host = InMemoryPluginHost([FakeClansPlugin(author="someone-else", clans={A: [str(B)]})])
    groups = GroupAggregator(plugin_host=host, use_clans=True)

    assert groups.resolve_pool(A) == {A}
    assert GroupAggregator(use_clans=True).resolve_pool(A) == {A}


def test_plugin_lookup_cached():
    host = InMemoryPluginHost([])
    groups = GroupAggregator(plugin_host=host, use_clans=True)

    for _ in range(5):
        groups.resolve_pool(A)

    assert host.lookups == 1


def test_plugin_failure_degrades_silently():
    groups = GroupAggregator(
        InMemoryTeams([[A, B]]),
        InMemoryPluginHost([ExplodingPlugin()]),
        use_teams=True,
        use_clans=True,
    )

    assert groups.resolve_pool(A) == {A, B}


def test_parse_member_ids_skips_garbage():
    assert parse_member_ids(["76561198000000001", " 5 ", "abc", None]) == {76561198000000001, 5}
    assert parse_member_ids(None) == set()
