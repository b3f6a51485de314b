"""Moteur de filtres de navigation sur le journal de parties.

Chaque dimension active de `NavigationFilters` produit un prédicat
(`GamePredicate`). Une partie est conservée si tous les prédicats l'acceptent :
l'ordre des parties est préservé et la liste d'entrée n'est jamais modifiée.

Une valeur de filtre mal formée (date illisible, camp ou mode inconnu...)
produit un prédicat qui rejette toutes les parties, sans lever d'exception.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Sequence

from lycans.config import (
    CAMP_FILTER_MODES,
    CAMPS,
    HARVEST_RANGES,
    MULTI_PLAYER_MODES,
    PAIR_ROLES,
    PRIMARY_MAPS,
    WIN_MODES,
    HarvestRange,
)
from lycans.data.parsers import format_display_date, parse_end_timing_day
from lycans.models import (
    CampFilter,
    GameLogEntry,
    MultiPlayerFilter,
    NavigationFilters,
    PlayerPairFilter,
    PlayerStat,
)
from lycans.analysis.roles import is_solo_camp, player_camp, winning_camp

logger = logging.getLogger(__name__)

_DAY_RE = re.compile(r"^(\d{2})/(\d{2})/(\d{4})$")
_MONTH_RE = re.compile(r"^(\d{2})/(\d{4})$")


@dataclass(frozen=True)
class GamePredicate:
    """Prédicat nommé sur une partie.

    Attributes:
        name: Nom de la dimension (utile pour les logs et les tests).
        test: Fonction partie -> bool.
    """
    name: str
    test: Callable[[GameLogEntry], bool]

    def __call__(self, game: GameLogEntry) -> bool:
        return self.test(game)


def _reject_all(name: str, reason: str) -> GamePredicate:
    logger.debug("Filtre %s invalide (%s): aucune partie retenue", name, reason)
    return GamePredicate(name, lambda game: False)


# =============================================================================
# Joueur / parties
# =============================================================================

def player_predicate(player: str, win_mode: str = WIN_MODES.ALL) -> GamePredicate:
    """Parties où `player` apparaît (et qu'il a gagnées en mode "wins-only")."""
    wins_only = win_mode == WIN_MODES.WINS_ONLY

    def test(game: GameLogEntry) -> bool:
        p = game.find_player(player)
        if p is None:
            return False
        return p.victorious if wins_only else True

    return GamePredicate("player", test)


def game_id_predicate(displayed_id: str) -> GamePredicate:
    wanted = str(displayed_id)
    return GamePredicate("game", lambda game: game.displayed_id == wanted)


def game_ids_predicate(displayed_ids: Iterable[str]) -> GamePredicate:
    wanted = frozenset(str(g) for g in displayed_ids)
    return GamePredicate("game_ids", lambda game: game.displayed_id in wanted)


# =============================================================================
# Camp
# =============================================================================

def _camp_matches(camp: str, target: str, small_camps: Sequence[str]) -> bool:
    if target == CAMPS.AUTRES and small_camps:
        return camp in small_camps
    return camp == target


def camp_predicate(camp_filter: CampFilter, bound_player: Optional[str] = None) -> GamePredicate:
    """Filtre de camp.

    Avec un joueur lié (filtre joueur actif), on compare le camp de ce joueur au
    camp visé ; les drapeaux d'exclusion choisissent la granularité comparée.
    Sans joueur lié, "wins-only" compare le camp gagnant et "all-assignments"
    cherche un joueur quelconque de ce camp.
    """
    target = camp_filter.selected_camp or ""
    mode = camp_filter.camp_filter_mode
    small_camps = tuple(camp_filter.small_camps)

    if mode not in (CAMP_FILTER_MODES.WINS_ONLY, CAMP_FILTER_MODES.ALL_ASSIGNMENTS):
        return _reject_all("camp", f"mode inconnu {mode!r}")

    wins_only = mode == CAMP_FILTER_MODES.WINS_ONLY

    if bound_player:
        def test_bound(game: GameLogEntry) -> bool:
            p = game.find_player(bound_player)
            if p is None:
                return False
            if target == CAMPS.AUTRES and small_camps:
                matched = player_camp(p) in small_camps
            else:
                camp = player_camp(
                    p,
                    regroup_villagers=not camp_filter.exclude_villagers,
                    regroup_wolf_sub_roles=not camp_filter.exclude_wolf_sub_roles,
                )
                matched = camp == target
            if not matched:
                return False
            return p.victorious if wins_only else True

        return GamePredicate("camp", test_bound)

    if wins_only:
        return GamePredicate(
            "camp",
            lambda game: _camp_matches(winning_camp(game), target, small_camps),
        )

    return GamePredicate(
        "camp",
        lambda game: any(_camp_matches(player_camp(p), target, small_camps) for p in game.player_stats),
    )


# =============================================================================
# Date / récolte / durée / carte / victoire
# =============================================================================

def date_predicate(selected_date: str) -> GamePredicate:
    """Filtre par jour ("JJ/MM/AAAA") ou par mois ("MM/AAAA")."""
    s = (selected_date or "").strip()
    if _DAY_RE.match(s):
        return GamePredicate("date", lambda game: format_display_date(game.start_date) == s)
    if _MONTH_RE.match(s):
        suffix = "/" + s

        def test_month(game: GameLogEntry) -> bool:
            formatted = format_display_date(game.start_date)
            return formatted is not None and formatted.endswith(suffix)

        return GamePredicate("date", test_month)
    return _reject_all("date", f"format inconnu {selected_date!r}")


def find_harvest_range(label: str) -> Optional[HarvestRange]:
    """Retourne la tranche de récolte correspondant au libellé ("%" optionnel)."""
    key = (label or "").strip().rstrip("%").strip()
    for r in HARVEST_RANGES:
        if r.label.rstrip("%") == key:
            return r
    return None


def harvest_percentage(game: GameLogEntry) -> Optional[float]:
    """Pourcentage de récolte réalisé, None si l'objectif est absent ou nul."""
    goal = game.harvest_goal
    done = game.harvest_done
    if goal is None or done is None or goal <= 0:
        return None
    return done / goal * 100.0


def harvest_range_predicate(label: str) -> GamePredicate:
    band = find_harvest_range(label)
    if band is None:
        return _reject_all("harvest", f"tranche inconnue {label!r}")

    def test(game: GameLogEntry) -> bool:
        pct = harvest_percentage(game)
        return pct is not None and band.contains(pct)

    return GamePredicate("harvest", test)


def game_duration_predicate(day_count: int) -> GamePredicate:
    return GamePredicate("duration", lambda game: parse_end_timing_day(game.end_timing) == day_count)


def map_name_predicate(map_name: str) -> GamePredicate:
    """Carte exacte, ou "Autres" = ni Village ni Château."""
    if map_name == CAMPS.AUTRES:
        return GamePredicate("map", lambda game: game.map_name not in PRIMARY_MAPS)
    return GamePredicate("map", lambda game: game.map_name == map_name)


def victory_type_predicate(victory_type: str) -> GamePredicate:
    return GamePredicate("victory_type", lambda game: game.victory_type == victory_type)


# =============================================================================
# Multi-joueurs / paires
# =============================================================================

def multi_player_predicate(
    multi: MultiPlayerFilter,
    camp_filter: Optional[CampFilter] = None,
) -> Optional[GamePredicate]:
    """Comparaison de plusieurs joueurs.

    Les camps sont comparés avec les sous-rôles loups regroupés, sauf si le
    filtre de camp demande de les exclure.

    Returns:
        Le prédicat, ou None si aucun joueur n'est sélectionné.
    """
    names = tuple(multi.selected_players)
    if not names:
        return None

    mode = multi.player_filter_mode
    if mode not in (
        MULTI_PLAYER_MODES.ALL_COMMON_GAMES,
        MULTI_PLAYER_MODES.OPPOSING_CAMPS,
        MULTI_PLAYER_MODES.SAME_CAMP,
    ):
        return _reject_all("multi_player", f"mode inconnu {mode!r}")

    regroup = not (camp_filter is not None and camp_filter.exclude_wolf_sub_roles)
    required_camp = camp_filter.selected_camp if camp_filter is not None else None
    winner_name = multi.winner_player

    def camp_of(p: PlayerStat) -> str:
        return player_camp(p, regroup_wolf_sub_roles=regroup)

    def test(game: GameLogEntry) -> bool:
        players: List[PlayerStat] = []
        for name in names:
            p = game.find_player(name)
            if p is None:
                return False
            players.append(p)

        winner = game.find_player(winner_name) if winner_name else None
        if winner_name and winner is None:
            return False

        if mode == MULTI_PLAYER_MODES.ALL_COMMON_GAMES:
            return winner.victorious if winner is not None else True

        camps = [camp_of(p) for p in players]
        distinct = set(camps)

        if mode == MULTI_PLAYER_MODES.OPPOSING_CAMPS:
            if len(distinct) <= 1:
                return False
            if winner is None:
                return True
            winner_camp = camp_of(winner)
            if winner_camp != winning_camp(game):
                return False
            # Camp solo : la victoire est individuelle.
            return winner.victorious if is_solo_camp(winner_camp) else True

        # same-camp
        if len(distinct) != 1:
            return False
        shared = camps[0]
        if required_camp and shared != required_camp:
            return False
        if winner is None:
            return True
        if shared != winning_camp(game):
            return False
        if is_solo_camp(shared):
            return all(p.victorious for p in players)
        return True

    return GamePredicate("multi_player", test)


def player_pair_predicate(pair: PlayerPairFilter) -> GamePredicate:
    """Paire de joueurs tous deux loups ("wolves") ou tous deux amoureux ("lovers")."""
    names = tuple(pair.selected_player_pair)
    if len(names) != 2:
        return _reject_all("player_pair", f"{len(names)} joueur(s) au lieu de 2")

    role = pair.selected_pair_role
    if role == PAIR_ROLES.WOLVES:
        expected = CAMPS.LOUP
    elif role == PAIR_ROLES.LOVERS:
        expected = CAMPS.AMOUREUX
    else:
        return _reject_all("player_pair", f"rôle inconnu {role!r}")

    def test(game: GameLogEntry) -> bool:
        for name in names:
            p = game.find_player(name)
            if p is None or player_camp(p) != expected:
                return False
        return True

    return GamePredicate("player_pair", test)


# =============================================================================
# Assemblage
# =============================================================================

def build_game_predicates(filters: Optional[NavigationFilters]) -> List[GamePredicate]:
    """Construit la liste des prédicats des dimensions actives."""
    if filters is None:
        return []

    preds: List[GamePredicate] = []
    if filters.selected_player:
        preds.append(player_predicate(filters.selected_player, filters.selected_player_win_mode))
    if filters.selected_game:
        preds.append(game_id_predicate(filters.selected_game))
    if filters.selected_game_ids is not None:
        preds.append(game_ids_predicate(filters.selected_game_ids))
    if filters.camp_filter is not None and filters.camp_filter.selected_camp:
        preds.append(camp_predicate(filters.camp_filter, filters.selected_player))
    if filters.selected_date:
        preds.append(date_predicate(filters.selected_date))
    if filters.selected_harvest_range:
        preds.append(harvest_range_predicate(filters.selected_harvest_range))
    if filters.selected_victory_type:
        preds.append(victory_type_predicate(filters.selected_victory_type))
    if filters.selected_game_duration:
        preds.append(game_duration_predicate(filters.selected_game_duration))
    if filters.selected_map_name:
        preds.append(map_name_predicate(filters.selected_map_name))
    if filters.multi_player_filter is not None:
        pred = multi_player_predicate(filters.multi_player_filter, filters.camp_filter)
        if pred is not None:
            preds.append(pred)
    if filters.player_pair_filter is not None:
        preds.append(player_pair_predicate(filters.player_pair_filter))
    return preds


def apply_navigation_filters(
    games: Sequence[GameLogEntry],
    filters: Optional[NavigationFilters] = None,
    *,
    highlighted_player: Optional[str] = None,
) -> List[GameLogEntry]:
    """Applique les filtres de navigation au journal de parties.

    Args:
        games: Parties à filtrer (non modifiées).
        filters: Filtres de navigation ; None ou vide = aucun filtre.
        highlighted_player: Joueur mis en avant. Sans autre filtre actif, seules
            ses parties sont retenues.

    Returns:
        Nouvelle liste, dans l'ordre d'entrée.
    """
    preds = build_game_predicates(filters)
    if not preds:
        if highlighted_player:
            preds = [player_predicate(highlighted_player)]
        else:
            return list(games)

    return [g for g in games if all(pred(g) for pred in preds)]
