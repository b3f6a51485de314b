"""Statistiques de morts et de kills (tueurs, victimes, causes).

Pour chaque partie :
- une "mort" par joueur dont la cause de mort est renseignée ;
- un "kill" par joueur tué par un autre joueur identifiable, avec une cause
  attribuable (pas de vote, faim, chute...).

Le camp d'un tueur est celui de son rôle de départ, sauf s'il a été
transformé en Loup (infection) ou en Zombie : le kill est alors attribué au
camp du rôle final.
"""

from __future__ import annotations

from collections import Counter, defaultdict
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import pandas as pd

from lycans.analysis.death_types import category_of, is_attributable
from lycans.analysis.roles import (
    ZOMBIE_ROLES,
    camp_from_role,
    player_camp,
    player_final_role,
)
from lycans.config import CAMPS, NO_DEATH_MARKERS
from lycans.models import GameLogEntry, PlayerStat


@dataclass(frozen=True)
class KillRecord:
    killer_id: str
    killer_name: str
    victim_id: str
    victim_name: str
    death_type: str
    killer_camp: str
    game_id: str


@dataclass(frozen=True)
class DeathTypeCount:
    death_type: str
    count: int
    percentage: float
    category: Optional[str] = None


@dataclass
class KillerStats:
    """Statistiques d'un tueur.

    Attributes:
        killer_name: Pseudo (le plus récent) du tueur.
        kills: Nombre de kills.
        victims: Victimes distinctes (pseudos, ordre de première apparition).
        percentage: Part des kills dans le total des morts (en %).
        games_played: Parties jouées. Sous filtre de camp, seules comptent
            les parties où son camp de tueur (voir `killer_camp`) est ce camp.
        kills_by_death_type: Kills par cause de mort.
        highlighted: True si c'est le joueur mis en avant.
    """
    killer_name: str
    kills: int = 0
    victims: Tuple[str, ...] = ()
    percentage: float = 0.0
    games_played: int = 0
    kills_by_death_type: Dict[str, int] = field(default_factory=dict)
    highlighted: bool = False

    @property
    def unique_victims(self) -> int:
        return len(self.victims)

    @property
    def average_kills_per_game(self) -> float:
        if self.games_played <= 0:
            return 0.0
        return self.kills / self.games_played


@dataclass
class PlayerDeathStats:
    """Statistiques de mort d'un joueur (victime)."""
    player_name: str
    total_deaths: int = 0
    deaths_by_type: Dict[str, int] = field(default_factory=dict)
    killed_by: Dict[str, int] = field(default_factory=dict)
    games_played: int = 0
    highlighted: bool = False

    @property
    def death_rate(self) -> Optional[float]:
        """Morts par partie jouée."""
        if self.games_played <= 0:
            return None
        return self.total_deaths / self.games_played


@dataclass
class DeathStatistics:
    """Résultat global de l'agrégation des morts."""
    total_deaths: int
    total_games: int
    deaths_by_type: List[DeathTypeCount]
    killer_stats: List[KillerStats]
    player_death_stats: List[PlayerDeathStats]
    kill_records: Tuple[KillRecord, ...] = ()

    @property
    def average_deaths_per_game(self) -> float:
        if self.total_games <= 0:
            return 0.0
        return self.total_deaths / self.total_games

    @property
    def most_common_death_type(self) -> Optional[str]:
        return self.deaths_by_type[0].death_type if self.deaths_by_type else None

    @property
    def most_deadly_killer(self) -> Optional[str]:
        return self.killer_stats[0].killer_name if self.killer_stats else None

    @property
    def deaths_by_category(self) -> Dict[str, int]:
        """Morts par catégorie de cause (causes sans catégorie ignorées)."""
        out: Dict[str, int] = {}
        for d in self.deaths_by_type:
            if d.category is not None:
                out[d.category] = out.get(d.category, 0) + d.count
        return out


# =============================================================================
# Helpers
# =============================================================================

def killer_camp(killer: PlayerStat) -> str:
    """Camp auquel attribuer les kills d'un joueur."""
    initial = killer.main_role_initial
    final = player_final_role(killer)
    if final != initial and (final == CAMPS.LOUP or final in ZOMBIE_ROLES):
        return camp_from_role(final)
    return camp_from_role(initial)


def _is_death(player: PlayerStat) -> bool:
    return (player.death_type or "").strip() not in NO_DEATH_MARKERS


def _camp_filter_active(selected_camp: Optional[str]) -> bool:
    return bool(selected_camp) and selected_camp != CAMPS.ALL_CAMPS


def _same_name(a: Optional[str], b: Optional[str]) -> bool:
    return bool(a) and bool(b) and a.lower() == b.lower()


def available_camps(games: Iterable[GameLogEntry]) -> List[str]:
    """Camps présents dans les parties (rôle final), triés."""
    camps = {player_camp(p) for g in games for p in g.player_stats}
    return sorted(camps)


# =============================================================================
# Agrégation
# =============================================================================

def extract_kill_records(
    games: Iterable[GameLogEntry],
    selected_camp: Optional[str] = None,
) -> List[KillRecord]:
    """Liste les kills attribuables (filtrés sur le camp du tueur si demandé)."""
    filter_camp = _camp_filter_active(selected_camp)
    out: List[KillRecord] = []
    for game in games:
        if game.legacy_data is not None and not game.legacy_data.death_information_filled:
            continue
        for victim in game.player_stats:
            if not victim.killer_name or not is_attributable(victim.death_type):
                continue
            killer = game.find_player(victim.killer_name)
            if killer is None:
                continue
            camp = killer_camp(killer)
            if filter_camp and camp != selected_camp:
                continue
            out.append(
                KillRecord(
                    killer_id=killer.identifier,
                    killer_name=killer.username,
                    victim_id=victim.identifier,
                    victim_name=victim.username,
                    death_type=str(victim.death_type),
                    killer_camp=camp,
                    game_id=game.displayed_id,
                )
            )
    return out


def compute_death_statistics(
    games: Sequence[GameLogEntry],
    selected_camp: Optional[str] = None,
    *,
    highlighted_player: Optional[str] = None,
) -> DeathStatistics:
    """Calcule les statistiques de morts, de tueurs et de victimes.

    Args:
        games: Parties (déjà filtrées par le moteur de filtres si besoin).
        selected_camp: Camp à analyser ; None ou "Tous les camps" = tous.
            Les morts et les parties jouées des victimes sont filtrées sur le
            camp de fin de partie ; les kills et les parties jouées des tueurs
            sur le camp de tueur (`killer_camp`).
        highlighted_player: Joueur mis en avant (marqué dans les résultats).

    Returns:
        Un `DeathStatistics`.
    """
    filter_camp = _camp_filter_active(selected_camp)
    considered = [
        g for g in games
        if g.legacy_data is None or g.legacy_data.death_information_filled
    ]

    names: Dict[str, str] = {}
    games_played: Counter = Counter()
    games_as_killer: Counter = Counter()
    deaths_by_type: Counter = Counter()
    victims: Dict[str, PlayerDeathStats] = {}

    for game in considered:
        for p in game.player_stats:
            pid = p.identifier
            names[pid] = p.username
            if not filter_camp or killer_camp(p) == selected_camp:
                games_as_killer[pid] += 1
            in_camp = not filter_camp or player_camp(p) == selected_camp
            if in_camp:
                games_played[pid] += 1
            if not _is_death(p) or not in_camp:
                continue

            dtype = str(p.death_type)
            deaths_by_type[dtype] += 1
            stats = victims.setdefault(pid, PlayerDeathStats(player_name=p.username))
            stats.total_deaths += 1
            stats.deaths_by_type[dtype] = stats.deaths_by_type.get(dtype, 0) + 1
            # Toute mort qui nomme un tueur, même non attribuable (vote...).
            if p.killer_name:
                killer = game.find_player(p.killer_name)
                killer_name = killer.username if killer is not None else p.killer_name
                stats.killed_by[killer_name] = stats.killed_by.get(killer_name, 0) + 1

    total_deaths = sum(deaths_by_type.values())

    death_types = []
    for dtype, count in sorted(deaths_by_type.items(), key=lambda kv: (-kv[1], kv[0])):
        category = category_of(dtype)
        death_types.append(
            DeathTypeCount(
                death_type=dtype,
                count=count,
                percentage=(count / total_deaths * 100.0) if total_deaths else 0.0,
                category=category.value if category is not None else None,
            )
        )

    records = extract_kill_records(considered, selected_camp)
    killers: Dict[str, KillerStats] = {}
    victims_seen: Dict[str, List[str]] = defaultdict(list)
    for r in records:
        ks = killers.setdefault(r.killer_id, KillerStats(killer_name=names.get(r.killer_id, r.killer_name)))
        ks.kills += 1
        ks.kills_by_death_type[r.death_type] = ks.kills_by_death_type.get(r.death_type, 0) + 1
        if r.victim_name not in victims_seen[r.killer_id]:
            victims_seen[r.killer_id].append(r.victim_name)

    for kid, ks in killers.items():
        ks.victims = tuple(victims_seen[kid])
        ks.games_played = games_as_killer.get(kid, 0)
        ks.percentage = (ks.kills / total_deaths * 100.0) if total_deaths else 0.0
        ks.highlighted = _same_name(ks.killer_name, highlighted_player)

    killer_stats = sorted(killers.values(), key=lambda k: (-k.kills, k.killer_name.lower()))

    # Joueurs sans mort mais ayant joué : inclus avec 0 mort.
    for pid, count in games_played.items():
        if pid not in victims:
            victims[pid] = PlayerDeathStats(player_name=names[pid])
    for pid, stats in victims.items():
        stats.player_name = names.get(pid, stats.player_name)
        stats.games_played = games_played.get(pid, 0)
        stats.highlighted = _same_name(stats.player_name, highlighted_player)

    player_stats = sorted(victims.values(), key=lambda s: (-s.total_deaths, s.player_name.lower()))

    return DeathStatistics(
        total_deaths=total_deaths,
        total_games=len(considered),
        deaths_by_type=death_types,
        killer_stats=killer_stats,
        player_death_stats=player_stats,
        kill_records=tuple(records),
    )


# =============================================================================
# Vues tabulaires
# =============================================================================

_KILL_COLUMNS = [
    "game_id",
    "killer_id",
    "killer_name",
    "killer_camp",
    "victim_id",
    "victim_name",
    "death_type",
]

# Colonnes acceptées pour la matrice des kills.
MATRIX_COLUMNS = ("victim_name", "death_type", "killer_camp")


def kill_records_to_frame(records: Iterable[KillRecord]) -> pd.DataFrame:
    """Un kill par ligne (colonnes de `KillRecord`)."""
    return pd.DataFrame(
        [{col: getattr(r, col) for col in _KILL_COLUMNS} for r in records],
        columns=_KILL_COLUMNS,
    )


def kill_matrix(records: Iterable[KillRecord], *, columns: str = "victim_name") -> pd.DataFrame:
    """Matrice des kills : index=tueur, colonnes=`columns`, valeurs=nombre de kills.

    Args:
        records: Kills (voir `extract_kill_records`).
        columns: "victim_name" (qui tue qui), "death_type" (comment) ou
            "killer_camp" (sous quel camp).

    Raises:
        ValueError: Si `columns` n'est pas une colonne acceptée.
    """
    if columns not in MATRIX_COLUMNS:
        raise ValueError(f"Colonne de matrice inconnue: {columns!r} (attendu: {', '.join(MATRIX_COLUMNS)})")

    df = kill_records_to_frame(records)
    if df.empty:
        return pd.DataFrame()

    pivot = df.pivot_table(
        index="killer_name",
        columns=columns,
        values="game_id",
        aggfunc="count",
        fill_value=0,
    )
    # Tueurs les plus actifs en haut, colonnes les plus fréquentes à gauche.
    pivot = pivot.loc[pivot.sum(axis=1).sort_values(ascending=False, kind="stable").index]
    pivot = pivot[pivot.sum(axis=0).sort_values(ascending=False, kind="stable").index]
    return pivot.astype(int)


def death_types_to_frame(stats: DeathStatistics) -> pd.DataFrame:
    """DF des causes de mort: death_type, category, count, percentage."""
    columns = ["death_type", "category", "count", "percentage"]
    return pd.DataFrame(
        [
            {"death_type": d.death_type, "category": d.category, "count": d.count, "percentage": d.percentage}
            for d in stats.deaths_by_type
        ],
        columns=columns,
    )
