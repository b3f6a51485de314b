"""Configuration centralisée et constantes du projet."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Tuple


def get_repo_root() -> str:
    """Racine du dépôt: premier dossier parent contenant `pyproject.toml` et `lycans/`.

    Sans dépôt reconnu (paquet installé ailleurs), retourne le dossier courant.
    """
    here = Path(__file__).resolve().parent
    for candidate in (here, *here.parents):
        if (candidate / "pyproject.toml").is_file() and (candidate / "lycans").is_dir():
            return str(candidate)
    return str(Path.cwd())


# =============================================================================
# Chemins et environnement
# =============================================================================

def get_default_game_log_path() -> str:
    """Retourne le chemin par défaut de l'export JSON du journal de parties."""
    override = os.environ.get("LYCANS_GAMELOG_PATH")
    if override:
        return override
    return os.path.join(get_repo_root(), "data", "gameLog.json")


DISPLAY_TIMEZONE = (os.environ.get("LYCANS_TIMEZONE") or "Europe/Paris").strip()
LOG_LEVEL = (os.environ.get("LYCANS_LOG_LEVEL") or "INFO").strip().upper()


# =============================================================================
# Camps
# =============================================================================

@dataclass(frozen=True)
class CampNames:
    """Noms de camps tels qu'ils apparaissent dans les données et les filtres."""
    VILLAGEOIS: str = "Villageois"
    LOUP: str = "Loup"
    AMOUREUX: str = "Amoureux"
    AUTRES: str = "Autres"
    ALL_CAMPS: str = "Tous les camps"


CAMPS = CampNames()


# =============================================================================
# Filtres de navigation
# =============================================================================

@dataclass(frozen=True)
class WinModes:
    """Modes du filtre joueur."""
    ALL: str = "all"
    WINS_ONLY: str = "wins-only"


@dataclass(frozen=True)
class CampFilterModes:
    """Modes du filtre de camp."""
    WINS_ONLY: str = "wins-only"
    ALL_ASSIGNMENTS: str = "all-assignments"


@dataclass(frozen=True)
class MultiPlayerModes:
    """Modes du filtre multi-joueurs."""
    ALL_COMMON_GAMES: str = "all-common-games"
    OPPOSING_CAMPS: str = "opposing-camps"
    SAME_CAMP: str = "same-camp"


@dataclass(frozen=True)
class PairRoles:
    """Rôles possibles pour le filtre de paire."""
    WOLVES: str = "wolves"
    LOVERS: str = "lovers"


WIN_MODES = WinModes()
CAMP_FILTER_MODES = CampFilterModes()
MULTI_PLAYER_MODES = MultiPlayerModes()
PAIR_ROLES = PairRoles()

# Cartes "principales" ; le filtre "Autres" sélectionne tout le reste.
PRIMARY_MAPS: Tuple[str, ...] = ("Village", "Château")


@dataclass(frozen=True)
class HarvestRange:
    """Tranche de pourcentage de récolte (bornes en %).

    `low_inclusive` indique si la borne basse est incluse ; `high` à None
    signifie "sans borne haute".
    """
    label: str
    low: float
    high: float | None
    low_inclusive: bool = False

    def contains(self, percentage: float) -> bool:
        """Retourne True si le pourcentage tombe dans la tranche."""
        above = percentage >= self.low if self.low_inclusive else percentage > self.low
        below = True if self.high is None else percentage <= self.high
        return above and below


HARVEST_RANGES: Tuple[HarvestRange, ...] = (
    HarvestRange("0-25%", 0.0, 25.0, low_inclusive=True),
    HarvestRange("26-50%", 25.0, 50.0),
    HarvestRange("51-75%", 50.0, 75.0),
    HarvestRange("76-99%", 75.0, 99.0),
    HarvestRange("100%", 100.0, None, low_inclusive=True),
)


# =============================================================================
# Votes
# =============================================================================

# Cible d'un vote "passé" (abstention explicite en meeting).
ABSTENTION_TARGET = "Passé"


# =============================================================================
# Morts
# =============================================================================

# Valeurs de DeathType qui ne comptent pas comme une mort.
NO_DEATH_MARKERS: Tuple[str, ...] = ("", "N/A", "SURVIVOR")


# =============================================================================
# Analyse de survie aux meetings
# =============================================================================

@dataclass(frozen=True)
class SurvivalBuckets:
    """Clés des regroupements de camp pour la survie en meeting."""
    VILLAGEOIS: str = "villageois"
    LOUPS: str = "loups"
    SOLO: str = "solo"

    def all(self) -> Tuple[str, ...]:
        return (self.VILLAGEOIS, self.LOUPS, self.SOLO)


SURVIVAL_BUCKETS = SurvivalBuckets()


# =============================================================================
# Chargement
# =============================================================================

@dataclass
class LoaderConfig:
    """Paramètres de l'adaptateur de chargement du journal de parties."""
    encoding: str = "utf-8"
    drop_unfinished_games: bool = True
    # Alias de noms (ancien pseudo -> pseudo courant).
    name_aliases: Dict[str, str] = field(default_factory=dict)


LOADER_CONFIG = LoaderConfig()
