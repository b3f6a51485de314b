"""Détails enrichis par partie (vue "liste des parties")."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

import pandas as pd

from lycans.config import CAMPS
from lycans.data.parsers import duration_seconds, format_display_date, parse_end_timing_day
from lycans.models import GameLogEntry, NavigationFilters
from lycans.analysis.filters import apply_navigation_filters, harvest_percentage
from lycans.analysis.roles import is_wolf_sub_role, player_camp, winning_camp

_MAIN_CAMPS = (CAMPS.LOUP, CAMPS.VILLAGEOIS, CAMPS.AMOUREUX)


@dataclass(frozen=True)
class GameDetails:
    """Résumé d'une partie.

    Attributes:
        game_id: Numéro affiché de la partie.
        date: Date de début "JJ/MM/AAAA" (None si illisible).
        wolf_count: Loups en fin de partie, Traître et Louveteau compris.
        solo_roles: Camps solo présents, dans l'ordre des joueurs.
        day_count: Nombre de jours/nuits extrait du timing de fin (0 si absent).
        harvest_percentage: Récolte réalisée en % de l'objectif.
        game_duration: Durée en secondes.
    """
    game_id: str
    date: Optional[str]
    is_modded: bool
    player_count: int
    wolf_count: int
    has_traitor: bool
    has_wolf_cub: bool
    has_lovers: bool
    solo_roles: Tuple[str, ...]
    winning_camp: str
    day_count: int
    winners: Tuple[str, ...]
    harvest: Optional[float]
    total_harvest: Optional[float]
    harvest_percentage: Optional[float]
    players: Tuple[str, ...]
    version: Optional[str]
    map_name: str
    victory_type: Optional[str]
    game_duration: Optional[int]


def game_details(game: GameLogEntry) -> GameDetails:
    """Calcule le résumé d'une partie."""
    camps = [player_camp(p) for p in game.player_stats]

    solo: List[str] = []
    for camp in camps:
        if camp not in _MAIN_CAMPS and not is_wolf_sub_role(camp) and camp not in solo:
            solo.append(camp)

    return GameDetails(
        game_id=game.displayed_id,
        date=format_display_date(game.start_date),
        is_modded=game.modded,
        player_count=len(game.player_stats),
        wolf_count=sum(1 for c in camps if c == CAMPS.LOUP or is_wolf_sub_role(c)),
        has_traitor="Traître" in camps,
        has_wolf_cub="Louveteau" in camps,
        has_lovers=CAMPS.AMOUREUX in camps,
        solo_roles=tuple(solo),
        winning_camp=winning_camp(game),
        day_count=parse_end_timing_day(game.end_timing) or 0,
        winners=tuple(p.username for p in game.player_stats if p.victorious),
        harvest=game.harvest_done,
        total_harvest=game.harvest_goal,
        harvest_percentage=harvest_percentage(game),
        players=tuple(p.username for p in game.player_stats),
        version=game.version or None,
        map_name=game.map_name,
        victory_type=game.victory_type,
        game_duration=duration_seconds(game.start_date, game.end_date),
    )


def compute_game_details(
    games: Sequence[GameLogEntry],
    filters: Optional[NavigationFilters] = None,
    *,
    highlighted_player: Optional[str] = None,
) -> List[GameDetails]:
    """Filtre les parties puis calcule leur résumé (ordre d'entrée conservé)."""
    filtered = apply_navigation_filters(games, filters, highlighted_player=highlighted_player)
    return [game_details(g) for g in filtered]


def game_details_to_frame(details: Iterable[GameDetails]) -> pd.DataFrame:
    """Retourne un DF (une ligne par partie) ; les listes sont jointes par ", "."""
    rows = []
    for d in details:
        row = asdict(d)
        for key in ("solo_roles", "winners", "players"):
            row[key] = ", ".join(row[key])
        rows.append(row)
    return pd.DataFrame(rows)
