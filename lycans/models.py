"""Modèles de données (dataclasses) du projet.

Les enregistrements de partie sont immuables une fois chargés : l'adaptateur
`lycans.data.loaders` construit ces objets à partir de l'export JSON, et le
moteur d'analyse ne fait que les lire.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Optional, Tuple


@dataclass(frozen=True)
class Vote:
    """Vote d'un joueur lors d'un meeting.

    Attributes:
        day: Numéro du meeting (1, 2, 3...).
        target: Pseudo du joueur visé, ou "Passé" pour une abstention.
        date: Date ISO du vote (absente sur les anciennes données).
    """
    day: int
    target: str
    date: Optional[str] = None


@dataclass(frozen=True)
class RoleChange:
    """Changement de rôle principal en cours de partie."""
    new_main_role: str
    date: Optional[str] = None


@dataclass(frozen=True)
class Action:
    """Action réalisée par un joueur (gadget, potion, sabotage...).

    Attributes:
        date: Date ISO de l'action.
        timing: Timing de jeu (ex: "N3", "J6").
        action_type: Type d'action (ex: "UseGadget", "DrinkPotion").
        action_name: Nom de l'objet ou de l'effet utilisé.
        action_target: Cible de l'action si applicable.
        position: Coordonnées (x, y, z) si connues.
    """
    date: Optional[str]
    timing: Optional[str]
    action_type: str
    action_name: Optional[str] = None
    action_target: Optional[str] = None
    position: Optional[Tuple[float, float, float]] = None


@dataclass(frozen=True)
class PlayerStat:
    """Participation d'un joueur à une partie.

    Attributes:
        username: Pseudo (déjà normalisé au chargement).
        player_id: Identifiant Steam, absent des anciennes données.
        main_role_initial: Rôle en début de partie.
        main_role_changes: Changements de rôle, dans l'ordre chronologique.
        secondary_role: Rôle secondaire éventuel.
        power: Pouvoir lié au rôle éventuel.
        victorious: True si le joueur fait partie des gagnants.
        death_timing: Code de timing de la mort (ex: "N2", "M1"), None si vivant.
        death_type: Code de cause de mort (voir `DeathType`).
        killer_name: Pseudo du tueur si applicable.
        votes: Votes émis, un par meeting auquel le joueur a survécu.
        actions: Actions réalisées pendant la partie.
    """
    username: str
    main_role_initial: str
    victorious: bool = False
    player_id: Optional[str] = None
    main_role_changes: Tuple[RoleChange, ...] = ()
    secondary_role: Optional[str] = None
    power: Optional[str] = None
    death_timing: Optional[str] = None
    death_type: Optional[str] = None
    killer_name: Optional[str] = None
    votes: Tuple[Vote, ...] = ()
    actions: Tuple[Action, ...] = ()
    seconds_talked_outside_meeting: float = 0.0
    seconds_talked_during_meeting: float = 0.0
    total_collected_loot: Optional[int] = None
    color: Optional[str] = None

    @property
    def identifier(self) -> str:
        """Identifiant stable du joueur (ID Steam, sinon pseudo)."""
        return self.player_id or self.username

    def matches(self, name: str) -> bool:
        """Retourne True si `name` désigne ce joueur (pseudo ou ID, sans casse)."""
        needle = (name or "").strip().lower()
        if not needle:
            return False
        if self.username.lower() == needle:
            return True
        return bool(self.player_id) and self.player_id.lower() == needle


@dataclass(frozen=True)
class LegacyData:
    """Champs hérités de l'ancien format tableur.

    Attributes:
        victory_type: Classification de la victoire (ex: "Votes").
        death_information_filled: False si les morts n'ont pas été saisies.
    """
    victory_type: Optional[str] = None
    death_information_filled: bool = True


@dataclass(frozen=True)
class GameLogEntry:
    """Enregistrement complet d'une partie jouée.

    Attributes:
        id: Identifiant interne (ex: "Ponce-20241005123000-1").
        displayed_id: Numéro chronologique global affiché.
        start_date: Date ISO de début.
        end_date: Date ISO de fin.
        map_name: Nom de la carte.
        harvest_goal: Objectif de récolte.
        harvest_done: Récolte réalisée en fin de partie.
        end_timing: Timing de fin (ex: "N5", "Jour 6").
        version: Version du mod.
        modded: True si la partie était moddée.
        legacy_data: Champs hérités, si présents.
        player_stats: Joueurs de la partie.
    """
    id: str
    displayed_id: str
    start_date: str
    end_date: Optional[str] = None
    map_name: str = ""
    harvest_goal: Optional[float] = None
    harvest_done: Optional[float] = None
    end_timing: Optional[str] = None
    version: str = ""
    modded: bool = False
    legacy_data: Optional[LegacyData] = None
    player_stats: Tuple[PlayerStat, ...] = ()

    def find_player(self, name: str) -> Optional[PlayerStat]:
        """Retourne le joueur correspondant à `name` (pseudo ou ID), sinon None."""
        for p in self.player_stats:
            if p.matches(name):
                return p
        return None

    @property
    def victory_type(self) -> Optional[str]:
        return self.legacy_data.victory_type if self.legacy_data else None


# =============================================================================
# Filtres de navigation
# =============================================================================

def _opt_str(v: Any) -> Optional[str]:
    if v is None:
        return None
    s = str(v).strip()
    return s or None


def _opt_int(v: Any) -> Optional[int]:
    if v is None or isinstance(v, bool):
        return None
    if isinstance(v, int):
        return v
    s = str(v).strip()
    return int(s) if s.isdigit() else None


def _str_tuple(v: Any) -> Tuple[str, ...]:
    if not v or isinstance(v, str):
        return ()
    if not isinstance(v, Iterable):
        return ()
    return tuple(str(x) for x in v if x is not None)


@dataclass(frozen=True)
class CampFilter:
    """Filtre de camp.

    Attributes:
        selected_camp: Camp visé (ex: "Loup", "Autres").
        camp_filter_mode: "wins-only" ou "all-assignments".
        exclude_wolf_sub_roles: Compare les sous-rôles loups sans les regrouper.
        exclude_villagers: Compare les sous-rôles villageois sans les regrouper.
        small_camps: Camps mineurs couverts par le seau "Autres".
    """
    selected_camp: Optional[str] = None
    camp_filter_mode: str = "wins-only"
    exclude_wolf_sub_roles: bool = False
    exclude_villagers: bool = False
    small_camps: Tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "CampFilter":
        return cls(
            selected_camp=_opt_str(d.get("selectedCamp")),
            camp_filter_mode=_opt_str(d.get("campFilterMode")) or "wins-only",
            exclude_wolf_sub_roles=bool(d.get("excludeWolfSubRoles")),
            exclude_villagers=bool(d.get("excludeVillagers")),
            small_camps=_str_tuple(d.get("_smallCamps") or d.get("smallCamps")),
        )


@dataclass(frozen=True)
class PlayerPairFilter:
    """Filtre de paire de joueurs (loups ou amoureux ensemble)."""
    selected_player_pair: Tuple[str, ...] = ()
    selected_pair_role: Optional[str] = None

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "PlayerPairFilter":
        return cls(
            selected_player_pair=_str_tuple(d.get("selectedPlayerPair")),
            selected_pair_role=_opt_str(d.get("selectedPairRole")),
        )


@dataclass(frozen=True)
class MultiPlayerFilter:
    """Filtre de comparaison multi-joueurs.

    Attributes:
        selected_players: Joueurs qui doivent tous être présents.
        player_filter_mode: "all-common-games", "opposing-camps" ou "same-camp".
        winner_player: Joueur dont la victoire est exigée (optionnel).
    """
    selected_players: Tuple[str, ...] = ()
    player_filter_mode: str = "all-common-games"
    winner_player: Optional[str] = None

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "MultiPlayerFilter":
        return cls(
            selected_players=_str_tuple(d.get("selectedPlayers")),
            player_filter_mode=_opt_str(d.get("playersFilterMode")) or "all-common-games",
            winner_player=_opt_str(d.get("winnerPlayer")),
        )


@dataclass(frozen=True)
class NavigationFilters:
    """Filtres de navigation actifs.

    Chaque dimension absente (None / vide) est ignorée par le moteur de filtres.
    """
    selected_player: Optional[str] = None
    selected_player_win_mode: str = "all"
    selected_game: Optional[str] = None
    selected_game_ids: Optional[Tuple[str, ...]] = None
    camp_filter: Optional[CampFilter] = None
    selected_date: Optional[str] = None
    selected_harvest_range: Optional[str] = None
    selected_game_duration: Optional[int] = None
    selected_map_name: Optional[str] = None
    selected_victory_type: Optional[str] = None
    player_pair_filter: Optional[PlayerPairFilter] = None
    multi_player_filter: Optional[MultiPlayerFilter] = None

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "NavigationFilters":
        """Construit les filtres depuis l'état de navigation (clés camelCase).

        Les clés inconnues sont ignorées.
        """
        game_ids = d.get("selectedGameIds")
        duration = d.get("selectedGameDuration")
        camp = d.get("campFilter")
        pair = d.get("playerPairFilter")
        multi = d.get("multiPlayerFilter")
        game = d.get("selectedGame")
        return cls(
            selected_player=_opt_str(d.get("selectedPlayer")),
            selected_player_win_mode=_opt_str(d.get("selectedPlayerWinMode")) or "all",
            selected_game=None if game is None else str(game),
            selected_game_ids=None if game_ids is None else _str_tuple(game_ids),
            camp_filter=CampFilter.from_dict(camp) if isinstance(camp, Mapping) else None,
            selected_date=_opt_str(d.get("selectedDate")),
            selected_harvest_range=_opt_str(d.get("selectedHarvestRange")),
            selected_game_duration=_opt_int(duration),
            selected_map_name=_opt_str(d.get("selectedMapName")),
            selected_victory_type=_opt_str(d.get("selectedVictoryType")),
            player_pair_filter=PlayerPairFilter.from_dict(pair) if isinstance(pair, Mapping) else None,
            multi_player_filter=MultiPlayerFilter.from_dict(multi) if isinstance(multi, Mapping) else None,
        )
