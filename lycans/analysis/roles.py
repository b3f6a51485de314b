"""Résolution des rôles et des camps.

Une seule table (`ROLE_TABLE`) décrit tous les rôles connus : leur famille de
camp, le camp auquel ils se rattachent et, pour les sous-rôles, le groupe de
regroupement (sous-rôle loup, sous-rôle villageois, variante amoureux).
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import Dict, FrozenSet, Iterable, Optional

from lycans.config import CAMPS
from lycans.models import GameLogEntry, PlayerStat, RoleChange

logger = logging.getLogger(__name__)


class CampFamily(str, Enum):
    """Famille de camp d'un rôle."""
    VILLAGEOIS = "Villageois"
    LOUP = "Loup"
    AMOUREUX = "Amoureux"
    SOLO = "Solo"


class SubRoleGroup(str, Enum):
    """Groupe de regroupement d'un sous-rôle."""
    WOLF = "wolf"
    VILLAGER = "villager"
    LOVER = "lover"


@dataclass(frozen=True)
class RoleInfo:
    """Entrée de la table des rôles.

    Attributes:
        family: Famille de camp.
        camp: Camp une fois le rôle regroupé.
        sub_role: Groupe de regroupement, None pour un rôle "principal".
    """
    family: CampFamily
    camp: str
    sub_role: Optional[SubRoleGroup] = None


def _solo(camp: str) -> RoleInfo:
    return RoleInfo(CampFamily.SOLO, camp)


ROLE_TABLE: Dict[str, RoleInfo] = {
    # Villageois
    "Villageois": RoleInfo(CampFamily.VILLAGEOIS, CAMPS.VILLAGEOIS),
    "Chasseur": RoleInfo(CampFamily.VILLAGEOIS, CAMPS.VILLAGEOIS, SubRoleGroup.VILLAGER),
    "Alchimiste": RoleInfo(CampFamily.VILLAGEOIS, CAMPS.VILLAGEOIS, SubRoleGroup.VILLAGER),
    "Villageois Élite": RoleInfo(CampFamily.VILLAGEOIS, CAMPS.VILLAGEOIS, SubRoleGroup.VILLAGER),
    "Protecteur": RoleInfo(CampFamily.VILLAGEOIS, CAMPS.VILLAGEOIS, SubRoleGroup.VILLAGER),
    "Disciple": RoleInfo(CampFamily.VILLAGEOIS, CAMPS.VILLAGEOIS, SubRoleGroup.VILLAGER),
    "Inquisiteur": RoleInfo(CampFamily.VILLAGEOIS, CAMPS.VILLAGEOIS, SubRoleGroup.VILLAGER),
    # Loups
    "Loup": RoleInfo(CampFamily.LOUP, CAMPS.LOUP),
    "Traître": RoleInfo(CampFamily.LOUP, CAMPS.LOUP, SubRoleGroup.WOLF),
    "Louveteau": RoleInfo(CampFamily.LOUP, CAMPS.LOUP, SubRoleGroup.WOLF),
    # Amoureux
    "Amoureux": RoleInfo(CampFamily.AMOUREUX, CAMPS.AMOUREUX),
    "Amoureux Loup": RoleInfo(CampFamily.AMOUREUX, CAMPS.AMOUREUX, SubRoleGroup.LOVER),
    "Amoureux Villageois": RoleInfo(CampFamily.AMOUREUX, CAMPS.AMOUREUX, SubRoleGroup.LOVER),
    # Rôles solo
    "Idiot du Village": _solo("Idiot du Village"),
    "Cannibale": _solo("Cannibale"),
    "Agent": _solo("Agent"),
    "Espion": _solo("Espion"),
    "Scientifique": _solo("Scientifique"),
    "La Bête": _solo("La Bête"),
    "Chasseur de primes": _solo("Chasseur de primes"),
    "Vaudou": _solo("Vaudou"),
    "Zombie": _solo("Vaudou"),
}

WOLF_SUB_ROLES: FrozenSet[str] = frozenset(
    r for r, info in ROLE_TABLE.items() if info.sub_role is SubRoleGroup.WOLF
)
SOLO_CAMPS: FrozenSet[str] = frozenset(
    info.camp for info in ROLE_TABLE.values() if info.family is CampFamily.SOLO
)
# Rôles de type zombie (camp Vaudou).
ZOMBIE_ROLES: FrozenSet[str] = frozenset({"Zombie", "Vaudou"})

# Priorité de départage du camp gagnant en cas d'égalité.
_WINNER_TIE_PRIORITY = (CAMPS.LOUP, CAMPS.AMOUREUX, CAMPS.VILLAGEOIS)


@lru_cache(maxsize=256)
def _log_unknown_role(role: str) -> None:
    logger.debug("Rôle inconnu %r classé %s", role, CAMPS.VILLAGEOIS)


def role_info(role: Optional[str]) -> Optional[RoleInfo]:
    """Retourne l'entrée de la table pour `role`, None si le rôle est inconnu."""
    if not role:
        return None
    return ROLE_TABLE.get(role.strip())


# =============================================================================
# Rôle final
# =============================================================================

def final_role(initial_role: str, changes: Optional[Iterable[RoleChange]] = None) -> str:
    """Retourne le rôle du joueur en fin de partie.

    Args:
        initial_role: Rôle en début de partie (renvoyé tel quel si aucun changement).
        changes: Changements de rôle dans l'ordre chronologique.

    Returns:
        Le rôle du dernier changement, sinon le rôle initial.
    """
    last: Optional[RoleChange] = None
    for change in changes or ():
        last = change
    if last is None:
        return initial_role
    return last.new_main_role


def player_final_role(player: PlayerStat) -> str:
    return final_role(player.main_role_initial, player.main_role_changes)


# =============================================================================
# Camp d'un rôle
# =============================================================================

def camp_from_role(
    role: Optional[str],
    *,
    regroup_lovers: bool = True,
    regroup_villagers: bool = True,
    regroup_wolf_sub_roles: bool = False,
) -> str:
    """Retourne le camp associé à un rôle.

    Args:
        role: Rôle du joueur.
        regroup_lovers: "Amoureux Loup"/"Amoureux Villageois" -> "Amoureux".
        regroup_villagers: Chasseur, Alchimiste, Protecteur... -> "Villageois".
        regroup_wolf_sub_roles: Traître, Louveteau -> "Loup".

    Returns:
        Le camp. Un sous-rôle non regroupé est renvoyé tel quel ; un rôle
        inconnu est classé "Villageois".
    """
    info = role_info(role)
    if info is None:
        if role:
            _log_unknown_role(role)
        return CAMPS.VILLAGEOIS

    name = role.strip()
    if info.sub_role is SubRoleGroup.LOVER:
        return info.camp if regroup_lovers else name
    if info.sub_role is SubRoleGroup.VILLAGER:
        return info.camp if regroup_villagers else name
    if info.sub_role is SubRoleGroup.WOLF:
        return info.camp if regroup_wolf_sub_roles else name
    return info.camp


def main_camp_from_role(role: Optional[str]) -> str:
    """Camp principal : "Villageois", "Loup" ou "Autres"."""
    info = role_info(role)
    if info is None or info.family is CampFamily.VILLAGEOIS:
        return CAMPS.VILLAGEOIS
    if info.family is CampFamily.LOUP:
        return CAMPS.LOUP
    return CAMPS.AUTRES


def is_wolf_sub_role(role: Optional[str]) -> bool:
    return bool(role) and role.strip() in WOLF_SUB_ROLES


def is_solo_camp(camp: Optional[str]) -> bool:
    return bool(camp) and camp in SOLO_CAMPS


def player_camp(
    player: PlayerStat,
    *,
    regroup_lovers: bool = True,
    regroup_villagers: bool = True,
    regroup_wolf_sub_roles: bool = False,
) -> str:
    """Camp du joueur en fin de partie (rôle final)."""
    return camp_from_role(
        player_final_role(player),
        regroup_lovers=regroup_lovers,
        regroup_villagers=regroup_villagers,
        regroup_wolf_sub_roles=regroup_wolf_sub_roles,
    )


# =============================================================================
# Camp gagnant
# =============================================================================

def winning_camp(game: GameLogEntry) -> str:
    """Détermine le camp gagnant d'une partie.

    Le camp gagnant est le camp le plus représenté parmi les joueurs
    victorieux (sous-rôles loups regroupés). Sans joueur victorieux, la
    partie est attribuée aux Villageois.

    En cas d'égalité: Loup, puis Amoureux, puis Villageois ; à défaut, le camp
    du premier joueur victorieux dans l'ordre de la partie.
    """
    camps = [
        player_camp(p, regroup_wolf_sub_roles=True)
        for p in game.player_stats
        if p.victorious
    ]
    if not camps:
        return CAMPS.VILLAGEOIS

    counts = Counter(camps)
    best = max(counts.values())
    tied = [c for c in counts if counts[c] == best]
    if len(tied) == 1:
        return tied[0]

    for camp in _WINNER_TIE_PRIORITY:
        if camp in tied:
            return camp
    # Counter conserve l'ordre de première apparition.
    return tied[0]


def did_camp_win(game: GameLogEntry, camp: str) -> bool:
    return winning_camp(game) == camp
