"""Fixtures communes : fabriques de joueurs et de parties."""

from __future__ import annotations

import pytest

from lycans.models import GameLogEntry, LegacyData, PlayerStat, RoleChange, Vote


def _player(
    username: str,
    role: str = "Villageois",
    *,
    changes=(),
    victorious: bool = False,
    player_id: str | None = None,
    death_timing: str | None = None,
    death_type: str | None = None,
    killer: str | None = None,
    votes=(),
) -> PlayerStat:
    return PlayerStat(
        username=username,
        main_role_initial=role,
        main_role_changes=tuple(RoleChange(r) for r in changes),
        victorious=victorious,
        player_id=player_id,
        death_timing=death_timing,
        death_type=death_type,
        killer_name=killer,
        votes=tuple(Vote(day=i, target=t) for i, t in enumerate(votes, start=1)),
    )


def _game(
    displayed_id: str,
    players,
    *,
    start_date: str = "2024-10-05T18:30:00Z",
    end_date: str = "2024-10-05T19:00:00Z",
    map_name: str = "Village",
    harvest_goal: float | None = 100,
    harvest_done: float | None = 50,
    end_timing: str | None = "N5",
    victory_type: str | None = None,
    death_information_filled: bool = True,
) -> GameLogEntry:
    legacy = None
    if victory_type is not None or not death_information_filled:
        legacy = LegacyData(victory_type=victory_type, death_information_filled=death_information_filled)
    return GameLogEntry(
        id=f"Ponce-20241005183000-{displayed_id}",
        displayed_id=displayed_id,
        start_date=start_date,
        end_date=end_date,
        map_name=map_name,
        harvest_goal=harvest_goal,
        harvest_done=harvest_done,
        end_timing=end_timing,
        legacy_data=legacy,
        player_stats=tuple(players),
    )


@pytest.fixture
def make_player():
    return _player


@pytest.fixture
def make_game():
    return _game


@pytest.fixture
def corpus():
    """Trois parties types.

    - G1 : P villageois perdant, les loups gagnent.
    - G2 : P loup gagnant, Alice traîtresse.
    - G3 : Bob et Alice amoureux gagnants, sur une autre carte.
    """
    g1 = _game("1", [
        _player("P", "Villageois"),
        _player("Alice", "Loup", victorious=True),
        _player("Bob", "Chasseur"),
    ], start_date="2024-10-05T18:30:00Z", map_name="Village", harvest_done=20, end_timing="N3")
    g2 = _game("2", [
        _player("P", "Loup", victorious=True),
        _player("Alice", "Traître", victorious=True),
        _player("Bob", "Villageois"),
    ], start_date="2024-10-12T20:00:00Z", map_name="Château", harvest_done=100, end_timing="J4",
        victory_type="Domination loups")
    g3 = _game("3", [
        _player("P", "Villageois"),
        _player("Alice", "Amoureux Loup", victorious=True),
        _player("Bob", "Amoureux Villageois", victorious=True),
    ], start_date="2024-11-02T21:00:00Z", map_name="Forêt", harvest_done=80, end_timing="M2")
    return [g1, g2, g3]
