"""Taxonomie des causes de mort.

Les codes correspondent à ceux produits par l'export du journal de parties.
Ils se répartissent en deux familles :
- les morts "attribuables" (un tueur est identifiable) ;
- les morts "système" (vote, faim, chute, chaîne d'Avatar...), sans tueur.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, FrozenSet, Optional


class DeathType(str, Enum):
    """Codes de cause de mort."""
    VOTED = "VOTED"
    STARVATION = "STARVATION"
    STARVATION_AS_BEAST = "STARVATION_AS_BEAST"
    BY_WOLF = "BY_WOLF"
    SURVIVALIST_NOT_SAVED = "SURVIVALIST_NOT_SAVED"
    BY_ZOMBIE = "BY_ZOMBIE"
    BY_BEAST = "BY_BEAST"
    BULLET = "BULLET"
    BULLET_HUMAN = "BULLET_HUMAN"
    BULLET_WOLF = "BULLET_WOLF"
    SHERIF_SUCCESS = "SHERIF_SUCCESS"
    OTHER_AGENT = "OTHER_AGENT"
    AVENGER = "AVENGER"
    SEER = "SEER"
    HANTED = "HANTED"
    ASSASSIN = "ASSASSIN"
    LOVER_DEATH = "LOVER_DEATH"
    BOMB = "BOMB"
    CRUSHED = "CRUSHED"
    FALL = "FALL"
    BY_AVATAR_CHAIN = "BY_AVATAR_CHAIN"
    UNKNOWN = "UNKNOWN"
    SURVIVOR = "SURVIVOR"

    @classmethod
    def parse(cls, value: Any) -> Optional["DeathType"]:
        """Retourne le membre correspondant au code, None si vide ou inconnu."""
        if value is None:
            return None
        s = str(value).strip().upper()
        if not s:
            return None
        try:
            return cls(s)
        except ValueError:
            return None


class DeathCategory(str, Enum):
    """Catégories d'analyse des causes de mort."""
    VOTING = "VOTING"
    WOLF_KILLS = "WOLF_KILLS"
    CREATURE_KILLS = "CREATURE_KILLS"
    HUNTER_KILLS = "HUNTER_KILLS"
    ROLE_KILLS = "ROLE_KILLS"
    POTIONS = "POTIONS"
    LOVER_DEATHS = "LOVER_DEATHS"
    ENVIRONMENTAL = "ENVIRONMENTAL"


DEATH_TYPE_CATEGORIES: Dict[DeathType, DeathCategory] = {
    DeathType.VOTED: DeathCategory.VOTING,
    DeathType.BY_WOLF: DeathCategory.WOLF_KILLS,
    DeathType.SURVIVALIST_NOT_SAVED: DeathCategory.WOLF_KILLS,
    DeathType.BY_ZOMBIE: DeathCategory.CREATURE_KILLS,
    DeathType.BY_BEAST: DeathCategory.CREATURE_KILLS,
    DeathType.BULLET: DeathCategory.HUNTER_KILLS,
    DeathType.BULLET_HUMAN: DeathCategory.HUNTER_KILLS,
    DeathType.BULLET_WOLF: DeathCategory.HUNTER_KILLS,
    DeathType.SHERIF_SUCCESS: DeathCategory.ROLE_KILLS,
    DeathType.OTHER_AGENT: DeathCategory.ROLE_KILLS,
    DeathType.AVENGER: DeathCategory.ROLE_KILLS,
    DeathType.SEER: DeathCategory.ROLE_KILLS,
    DeathType.HANTED: DeathCategory.POTIONS,
    DeathType.ASSASSIN: DeathCategory.POTIONS,
    DeathType.LOVER_DEATH: DeathCategory.LOVER_DEATHS,
    DeathType.STARVATION: DeathCategory.ENVIRONMENTAL,
    DeathType.STARVATION_AS_BEAST: DeathCategory.ENVIRONMENTAL,
    DeathType.BOMB: DeathCategory.ENVIRONMENTAL,
    DeathType.CRUSHED: DeathCategory.ENVIRONMENTAL,
    DeathType.FALL: DeathCategory.ENVIRONMENTAL,
    DeathType.BY_AVATAR_CHAIN: DeathCategory.ENVIRONMENTAL,
}

# Morts sans tueur attribuable.
NON_ATTRIBUTABLE_DEATH_TYPES: FrozenSet[DeathType] = frozenset({
    DeathType.VOTED,
    DeathType.STARVATION,
    DeathType.STARVATION_AS_BEAST,
    DeathType.FALL,
    DeathType.BY_AVATAR_CHAIN,
    DeathType.UNKNOWN,
    DeathType.SURVIVOR,
})

# Libellés de l'ancien format tableur -> codes.
LEGACY_DEATH_LABELS: Dict[str, DeathType] = {
    "mort aux votes": DeathType.VOTED,
    "mort de faim": DeathType.STARVATION,
    "mort bestiale": DeathType.STARVATION_AS_BEAST,
    "tué par loup": DeathType.BY_WOLF,
    "tué par un loup": DeathType.BY_WOLF,
    "tué par loup ressuscité": DeathType.BY_WOLF,
    "tué par loup amoureux": DeathType.BY_WOLF,
    "tué par zombie": DeathType.BY_ZOMBIE,
    "tué par la bête": DeathType.BY_BEAST,
    "tué par chasseur": DeathType.BULLET,
    "abattu par une balle": DeathType.BULLET,
    "tué par chasseur de primes": DeathType.BULLET,
    "tué par shérif": DeathType.SHERIF_SUCCESS,
    "tué par l'agent": DeathType.OTHER_AGENT,
    "tué par vengeur": DeathType.AVENGER,
    "rôle deviné par loup": DeathType.SEER,
    "tué par potion hantée": DeathType.HANTED,
    "tué par potion assassin": DeathType.ASSASSIN,
    "amoureux mort": DeathType.LOVER_DEATH,
    "tué par son amoureux": DeathType.LOVER_DEATH,
    "a tué son amoureux": DeathType.LOVER_DEATH,
    "a explosé": DeathType.BOMB,
    "a été écrasé": DeathType.CRUSHED,
    "mort de chute": DeathType.FALL,
    "mort liée à l'avatar": DeathType.BY_AVATAR_CHAIN,
}


def is_attributable(death_type: Any) -> bool:
    """True si la cause de mort implique un tueur identifiable.

    Un code vide ou inconnu n'est pas attribuable.
    """
    dt = DeathType.parse(death_type)
    return dt is not None and dt not in NON_ATTRIBUTABLE_DEATH_TYPES


def category_of(death_type: Any) -> Optional[DeathCategory]:
    dt = DeathType.parse(death_type)
    if dt is None:
        return None
    return DEATH_TYPE_CATEGORIES.get(dt)


def codify_death_type(raw: Any) -> Optional[str]:
    """Convertit une cause de mort (code ou libellé hérité) en code.

    Args:
        raw: Code ("BY_WOLF") ou libellé de l'ancien format ("Tué par Loup").

    Returns:
        Le code, "UNKNOWN" pour un libellé non reconnu, None si vide.
    """
    if raw is None:
        return None
    s = str(raw).strip()
    if not s:
        return None
    dt = DeathType.parse(s)
    if dt is not None:
        return dt.value
    if s.upper() == "N/A":
        return "N/A"
    legacy = LEGACY_DEATH_LABELS.get(s.lower())
    return legacy.value if legacy is not None else DeathType.UNKNOWN.value
