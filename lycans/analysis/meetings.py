"""Survie aux meetings (phases de vote).

Séquence d'une journée : J1 -> N1 -> M1 -> J2 -> N2 -> M2 -> ...
Un joueur mort en J2 ou N2 n'assiste donc pas au meeting M2, alors qu'un
joueur mort en M2 y a participé (et y a été éliminé).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence

import pandas as pd

from lycans.analysis.death_types import DeathType
from lycans.analysis.roles import player_camp
from lycans.config import CAMPS, SURVIVAL_BUCKETS
from lycans.data.parsers import parse_timing_code
from lycans.models import GameLogEntry, PlayerStat

_BUCKET_ALIASES = {
    "villageois": SURVIVAL_BUCKETS.VILLAGEOIS,
    "loup": SURVIVAL_BUCKETS.LOUPS,
    "loups": SURVIVAL_BUCKETS.LOUPS,
    "solo": SURVIVAL_BUCKETS.SOLO,
}


@dataclass
class CampSurvival:
    """Participation et éliminations aux meetings pour un regroupement de camp."""
    meetings_participated: int = 0
    deaths_at_meetings: int = 0

    @property
    def survival_rate(self) -> Optional[float]:
        """Taux de survie en %, None sans participation."""
        if self.meetings_participated <= 0:
            return None
        survived = self.meetings_participated - self.deaths_at_meetings
        return survived / self.meetings_participated * 100.0


@dataclass
class PlayerMeetingSurvival:
    """Survie aux meetings d'un joueur, globale et par camp."""
    player_id: str
    player_name: str
    camps: Dict[str, CampSurvival] = field(
        default_factory=lambda: {k: CampSurvival() for k in SURVIVAL_BUCKETS.all()}
    )
    highlighted: bool = False

    @property
    def total_meetings_participated(self) -> int:
        return sum(c.meetings_participated for c in self.camps.values())

    @property
    def total_deaths_at_meetings(self) -> int:
        return sum(c.deaths_at_meetings for c in self.camps.values())

    @property
    def survival_rate(self) -> Optional[float]:
        total = CampSurvival(self.total_meetings_participated, self.total_deaths_at_meetings)
        return total.survival_rate


@dataclass
class MeetingSurvivalStatistics:
    total_games: int
    total_meetings: int
    player_stats: List[PlayerMeetingSurvival]
    camp_totals: Dict[str, CampSurvival]


def survival_bucket(player: PlayerStat) -> str:
    """Regroupement de camp (rôle final, sous-rôles loups regroupés)."""
    camp = player_camp(player, regroup_wolf_sub_roles=True)
    if camp == CAMPS.VILLAGEOIS:
        return SURVIVAL_BUCKETS.VILLAGEOIS
    if camp == CAMPS.LOUP:
        return SURVIVAL_BUCKETS.LOUPS
    return SURVIVAL_BUCKETS.SOLO


def max_meeting(game: GameLogEntry) -> int:
    """Nombre de meetings de la partie, déduit des listes de votes."""
    longest = 0
    for p in game.player_stats:
        longest = max(longest, len(p.votes), *(v.day for v in p.votes))
    return longest


def was_alive_at_meeting(player: PlayerStat, meeting: int) -> bool:
    """True si le joueur était vivant au début du meeting `meeting`.

    Un code de timing inconnu ("U3") ou illisible exclut le joueur.
    """
    if not player.death_timing:
        return True
    parsed = parse_timing_code(player.death_timing)
    if parsed is None:
        return False
    phase, number = parsed
    if phase == "M":
        return meeting <= number
    if phase in ("N", "J"):
        return meeting < number
    return False


def died_at_meeting(player: PlayerStat, meeting: int) -> bool:
    """True si le joueur a été éliminé par vote lors de ce meeting."""
    if DeathType.parse(player.death_type) is not DeathType.VOTED:
        return False
    return parse_timing_code(player.death_timing) == ("M", meeting)


def compute_meeting_survival(
    games: Sequence[GameLogEntry],
    camp_filter: Optional[str] = None,
    *,
    highlighted_player: Optional[str] = None,
) -> MeetingSurvivalStatistics:
    """Calcule les taux de survie aux meetings par joueur et par camp.

    Args:
        games: Parties à analyser.
        camp_filter: "villageois", "loups" ou "solo" (les noms de camp
            "Villageois"/"Loup" sont acceptés) ; None = tous les camps.
        highlighted_player: Joueur mis en avant (marqué dans les résultats).

    Returns:
        Statistiques triées par taux de survie décroissant ; les joueurs sans
        participation sont exclus.
    """
    only_bucket: Optional[str] = None
    if camp_filter:
        only_bucket = _BUCKET_ALIASES.get(camp_filter.strip().lower(), "")

    players: Dict[str, PlayerMeetingSurvival] = {}
    total_meetings = 0

    for game in games:
        meetings = max_meeting(game)
        total_meetings += meetings
        for p in game.player_stats:
            bucket = survival_bucket(p)
            if only_bucket is not None and bucket != only_bucket:
                continue
            stats = players.setdefault(p.identifier, PlayerMeetingSurvival(p.identifier, p.username))
            stats.player_name = p.username
            camp = stats.camps[bucket]
            for m in range(1, meetings + 1):
                if not was_alive_at_meeting(p, m):
                    continue
                camp.meetings_participated += 1
                if died_at_meeting(p, m):
                    camp.deaths_at_meetings += 1

    needle = (highlighted_player or "").lower()
    result = [s for s in players.values() if s.total_meetings_participated > 0]
    for s in result:
        s.highlighted = bool(needle) and s.player_name.lower() == needle
    result.sort(key=lambda s: (-(s.survival_rate or 0.0), -s.total_meetings_participated, s.player_name.lower()))

    camp_totals = {k: CampSurvival() for k in SURVIVAL_BUCKETS.all()}
    for s in result:
        for k, c in s.camps.items():
            camp_totals[k].meetings_participated += c.meetings_participated
            camp_totals[k].deaths_at_meetings += c.deaths_at_meetings

    return MeetingSurvivalStatistics(
        total_games=len(games),
        total_meetings=total_meetings,
        player_stats=result,
        camp_totals=camp_totals,
    )


def meeting_survival_to_frame(players: Iterable[PlayerMeetingSurvival]) -> pd.DataFrame:
    """DF une ligne par joueur, avec les colonnes par camp."""
    rows = []
    for s in players:
        row = {
            "player_id": s.player_id,
            "player_name": s.player_name,
            "meetings_participated": s.total_meetings_participated,
            "deaths_at_meetings": s.total_deaths_at_meetings,
            "survival_rate": s.survival_rate,
        }
        for k, c in s.camps.items():
            row[f"{k}_meetings"] = c.meetings_participated
            row[f"{k}_deaths"] = c.deaths_at_meetings
            row[f"{k}_survival_rate"] = c.survival_rate
        rows.append(row)
    return pd.DataFrame(rows)
