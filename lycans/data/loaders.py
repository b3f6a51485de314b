"""Chargement du journal de parties (export JSON) vers les modèles.

Toutes les conversions de format (ancien format tableur, format de transition,
format courant) sont faites ici : le moteur d'analyse ne manipule que les
dataclasses de `lycans.models`.
"""

from __future__ import annotations

import json
import logging
import os
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from lycans.analysis.death_types import codify_death_type
from lycans.config import ABSTENTION_TARGET, LOADER_CONFIG, LoaderConfig
from lycans.data.parsers import coerce_float, coerce_int, coerce_str
from lycans.models import (
    Action,
    GameLogEntry,
    LegacyData,
    PlayerStat,
    RoleChange,
    Vote,
)

logger = logging.getLogger(__name__)


class GameLogError(ValueError):
    """Le fichier ou le contenu du journal de parties est inexploitable."""


# =============================================================================
# Helpers
# =============================================================================

def _as_list(v: Any) -> list:
    return v if isinstance(v, list) else []


def _as_bool(v: Any) -> bool:
    if isinstance(v, bool):
        return v
    if isinstance(v, str):
        return v.strip().lower() in {"true", "1", "oui", "yes"}
    if isinstance(v, (int, float)):
        return v != 0
    return False


def _parse_position(v: Any) -> Optional[Tuple[float, float, float]]:
    if not isinstance(v, Mapping):
        return None
    coords = [coerce_float(v.get(k)) for k in ("x", "y", "z")]
    if any(c is None for c in coords):
        return None
    return (coords[0], coords[1], coords[2])


def parse_game_id(game_id: str) -> Tuple[str, int]:
    """Extrait (timestamp, numéro final) d'un identifiant de partie.

    Formats supportés:
    - "Ponce-20231013000000-1" (ancien format)
    - "Nales-20250912210715" (format courant)
    """
    parts = (game_id or "").split("-")
    if len(parts) == 3:
        return parts[1], coerce_int(parts[2]) or 0
    if len(parts) == 2:
        return parts[1], 0
    return "0", 0


def generate_displayed_ids(game_ids: Iterable[str]) -> Dict[str, str]:
    """Numérote les parties dans l'ordre chronologique global (à partir de 1)."""
    ordered = sorted(game_ids, key=parse_game_id)
    return {gid: str(i) for i, gid in enumerate(ordered, start=1)}


# =============================================================================
# Conversion des enregistrements
# =============================================================================

def _parse_votes(raw: Any, rename) -> Tuple[Vote, ...]:
    votes: List[Vote] = []
    for idx, v in enumerate(_as_list(raw), start=1):
        if not isinstance(v, Mapping):
            continue
        target = coerce_str(v.get("Target"))
        if target is None:
            continue
        if target != ABSTENTION_TARGET:
            target = rename(target)
        day = coerce_int(v.get("Day"))
        votes.append(Vote(day=day if day and day > 0 else idx, target=target, date=coerce_str(v.get("Date"))))
    return tuple(votes)


def _parse_role_changes(raw_player: Mapping[str, Any], initial: str) -> Tuple[RoleChange, ...]:
    changes: List[RoleChange] = []
    for c in _as_list(raw_player.get("MainRoleChanges")):
        if not isinstance(c, Mapping):
            continue
        role = coerce_str(c.get("NewMainRole"))
        if role:
            changes.append(RoleChange(new_main_role=role, date=coerce_str(c.get("RoleChangeDateIrl"))))
    # Ancien format: rôle final stocké à part, sans historique.
    legacy_final = coerce_str(raw_player.get("MainRoleFinal"))
    if not changes and legacy_final and legacy_final != initial:
        changes.append(RoleChange(new_main_role=legacy_final))
    return tuple(changes)


def _parse_actions(raw: Any, rename) -> Tuple[Action, ...]:
    out: List[Action] = []
    for a in _as_list(raw):
        if not isinstance(a, Mapping):
            continue
        target = coerce_str(a.get("ActionTarget"))
        out.append(
            Action(
                date=coerce_str(a.get("Date")),
                timing=coerce_str(a.get("Timing")),
                action_type=coerce_str(a.get("ActionType")) or "",
                action_name=coerce_str(a.get("ActionName")),
                action_target=rename(target) if target else None,
                position=_parse_position(a.get("Position")),
            )
        )
    return tuple(out)


def player_stat_from_dict(
    raw: Mapping[str, Any],
    *,
    aliases: Optional[Mapping[str, str]] = None,
    rename=None,
) -> PlayerStat:
    """Construit un `PlayerStat` à partir d'un enregistrement JSON.

    Args:
        raw: Dictionnaire au format de l'export (clés PascalCase).
        aliases: Table ID/pseudo -> pseudo canonique.
        rename: Fonction de renommage des références (tueur, cibles de vote).
    """
    aliases = aliases or {}
    rename = rename or (lambda name: name)

    player_id = coerce_str(raw.get("ID"))
    username = coerce_str(raw.get("Username")) or player_id or "?"
    username = aliases.get(player_id or "", aliases.get(username, username))

    initial = coerce_str(raw.get("MainRoleInitial")) or ""
    killer = coerce_str(raw.get("KillerName"))

    return PlayerStat(
        username=username,
        player_id=player_id,
        main_role_initial=initial,
        main_role_changes=_parse_role_changes(raw, initial),
        secondary_role=coerce_str(raw.get("SecondaryRole")),
        power=coerce_str(raw.get("Power")),
        victorious=_as_bool(raw.get("Victorious")),
        death_timing=coerce_str(raw.get("DeathTiming")),
        death_type=codify_death_type(raw.get("DeathType")),
        killer_name=rename(killer) if killer else None,
        votes=_parse_votes(raw.get("Votes"), rename),
        actions=_parse_actions(raw.get("Actions"), rename),
        seconds_talked_outside_meeting=coerce_float(raw.get("SecondsTalkedOutsideMeeting")) or 0.0,
        seconds_talked_during_meeting=coerce_float(raw.get("SecondsTalkedDuringMeeting")) or 0.0,
        total_collected_loot=coerce_int(raw.get("TotalCollectedLoot")),
        color=coerce_str(raw.get("Color")),
    )


def _build_rename(raw_players: list, aliases: Mapping[str, str]):
    """Construit la fonction de renommage des références d'une partie.

    Les références (tueur, cibles de vote/action) utilisent les pseudos
    d'origine ; on les fait pointer vers les pseudos canoniques.
    """
    mapping: Dict[str, str] = {}
    for rp in raw_players:
        if not isinstance(rp, Mapping):
            continue
        original = coerce_str(rp.get("Username"))
        if not original:
            continue
        pid = coerce_str(rp.get("ID")) or ""
        canonical = aliases.get(pid, aliases.get(original, original))
        if canonical != original:
            mapping[original.lower()] = canonical

    def rename(name: str) -> str:
        return mapping.get(name.lower(), name)

    return rename


def game_entry_from_dict(
    raw: Mapping[str, Any],
    *,
    displayed_id: Optional[str] = None,
    aliases: Optional[Mapping[str, str]] = None,
) -> GameLogEntry:
    """Construit un `GameLogEntry` à partir d'un enregistrement JSON."""
    aliases = aliases or {}
    raw_players = _as_list(raw.get("PlayerStats"))
    rename = _build_rename(raw_players, aliases)

    legacy_raw = raw.get("LegacyData")
    legacy = None
    if isinstance(legacy_raw, Mapping):
        filled = legacy_raw.get("DeathInformationFilled")
        legacy = LegacyData(
            victory_type=coerce_str(legacy_raw.get("VictoryType")),
            death_information_filled=True if filled is None else _as_bool(filled),
        )

    players = tuple(
        player_stat_from_dict(rp, aliases=aliases, rename=rename)
        for rp in raw_players
        if isinstance(rp, Mapping)
    )

    game_id = coerce_str(raw.get("Id")) or ""
    return GameLogEntry(
        id=game_id,
        displayed_id=displayed_id or coerce_str(raw.get("DisplayedId")) or game_id,
        start_date=coerce_str(raw.get("StartDate")) or "",
        end_date=coerce_str(raw.get("EndDate")),
        map_name=coerce_str(raw.get("MapName")) or "",
        harvest_goal=coerce_float(raw.get("HarvestGoal")),
        harvest_done=coerce_float(raw.get("HarvestDone")),
        end_timing=coerce_str(raw.get("EndTiming")),
        version=coerce_str(raw.get("Version")) or "",
        modded=_as_bool(raw.get("Modded")),
        legacy_data=legacy,
        player_stats=players,
    )


# =============================================================================
# Points d'entrée
# =============================================================================

def game_log_from_dict(
    payload: Any,
    *,
    aliases: Optional[Mapping[str, str]] = None,
    config: LoaderConfig = LOADER_CONFIG,
) -> List[GameLogEntry]:
    """Convertit un export décodé en liste de parties.

    Args:
        payload: `{"GameStats": [...]}` ou directement la liste des parties.
        aliases: Table ID/pseudo -> pseudo canonique (fusionnée avec la config).
        config: Paramètres du chargement.

    Returns:
        Les parties, dans l'ordre de l'export.

    Raises:
        GameLogError: Si la forme du contenu est inattendue.
    """
    if isinstance(payload, Mapping):
        records = payload.get("GameStats")
    else:
        records = payload
    if not isinstance(records, list):
        raise GameLogError("Contenu inattendu: liste 'GameStats' introuvable")

    merged_aliases = {**config.name_aliases, **(aliases or {})}

    kept: List[Mapping[str, Any]] = []
    for raw in records:
        if not isinstance(raw, Mapping):
            logger.warning("Enregistrement de partie ignoré (type %s)", type(raw).__name__)
            continue
        if config.drop_unfinished_games and not coerce_str(raw.get("EndDate")):
            logger.warning("Partie %s ignorée: EndDate manquante", raw.get("Id"))
            continue
        kept.append(raw)

    generated = generate_displayed_ids(coerce_str(r.get("Id")) or "" for r in kept)

    games: List[GameLogEntry] = []
    for raw in kept:
        game_id = coerce_str(raw.get("Id")) or ""
        displayed = coerce_str(raw.get("DisplayedId")) or generated.get(game_id)
        games.append(game_entry_from_dict(raw, displayed_id=displayed, aliases=merged_aliases))

    logger.info("%d parties chargées (%d ignorées)", len(games), len(records) - len(games))
    return games


def load_game_log(
    path: str,
    *,
    aliases: Optional[Mapping[str, str]] = None,
    config: LoaderConfig = LOADER_CONFIG,
) -> List[GameLogEntry]:
    """Charge le journal de parties depuis un fichier JSON.

    Raises:
        GameLogError: Si le fichier est absent ou n'est pas un JSON exploitable.
    """
    if not path or not os.path.exists(path):
        raise GameLogError(f"Fichier introuvable: {path}")
    try:
        with open(path, "r", encoding=config.encoding) as f:
            payload = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise GameLogError(f"Lecture impossible de {path}: {e}") from e
    return game_log_from_dict(payload, aliases=aliases, config=config)
