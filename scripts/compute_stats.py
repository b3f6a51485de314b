#!/usr/bin/env python3
"""Calcul des statistiques Lycans en ligne de commande.

Charge l'export JSON du journal de parties, applique les filtres de
navigation demandés puis affiche un tableau récapitulatif.

Usage:
    python scripts/compute_stats.py --help
    python scripts/compute_stats.py --game-log data/gameLog.json --section deaths
    python scripts/compute_stats.py --player Ponce --camp Loup --camp-mode all-assignments
    python scripts/compute_stats.py --section meetings --survival-camp loups
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import pandas as pd

# Ajouter le répertoire parent au path pour les imports
REPO_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(REPO_ROOT))

from lycans.analysis import (
    apply_navigation_filters,
    compute_death_statistics,
    compute_game_details,
    compute_meeting_survival,
    compute_player_voting_behavior,
    compute_voting_stats,
    death_types_to_frame,
    game_details_to_frame,
    kill_matrix,
    meeting_survival_to_frame,
    player_voting_to_frame,
)
from lycans.analysis.deaths import MATRIX_COLUMNS
from lycans.config import LOG_LEVEL, get_default_game_log_path
from lycans.data import GameLogError, load_game_log
from lycans.models import CampFilter, NavigationFilters

logging.basicConfig(
    level=getattr(logging, LOG_LEVEL, logging.INFO),
    format="%(asctime)s [%(levelname)s] %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)

SECTIONS = ("games", "deaths", "meetings", "voting")


def build_filters(args: argparse.Namespace) -> NavigationFilters:
    camp = None
    if args.camp:
        camp = CampFilter(
            selected_camp=args.camp,
            camp_filter_mode=args.camp_mode,
            exclude_wolf_sub_roles=args.exclude_wolf_sub_roles,
        )
    return NavigationFilters(
        selected_player=args.player,
        selected_player_win_mode="wins-only" if args.wins_only else "all",
        camp_filter=camp,
        selected_date=args.date,
        selected_map_name=args.map_name,
    )


def _print_frame(title: str, df: pd.DataFrame, limit: int) -> None:
    print(f"\n=== {title} ===")
    if df.empty:
        print("(aucune donnée)")
        return
    with pd.option_context("display.max_columns", None, "display.width", 160):
        print(df.head(limit).to_string(index=False))


def run(args: argparse.Namespace) -> int:
    try:
        games = load_game_log(args.game_log)
    except GameLogError as e:
        logger.error("%s", e)
        return 1

    filters = build_filters(args)
    filtered = apply_navigation_filters(games, filters, highlighted_player=args.highlight)
    logger.info("%d parties retenues sur %d", len(filtered), len(games))

    if args.section == "games":
        _print_frame("Parties", game_details_to_frame(compute_game_details(filtered)), args.limit)
    elif args.section == "deaths":
        stats = compute_death_statistics(filtered, args.death_camp, highlighted_player=args.highlight)
        print(f"Morts: {stats.total_deaths} sur {stats.total_games} parties "
              f"({stats.average_deaths_per_game:.2f} par partie)")
        _print_frame("Causes de mort", death_types_to_frame(stats), args.limit)
        matrix = kill_matrix(stats.kill_records, columns=args.matrix_by)
        _print_frame(f"Kills par {args.matrix_by}", matrix.reset_index(), args.limit)
    elif args.section == "meetings":
        survival = compute_meeting_survival(filtered, args.survival_camp, highlighted_player=args.highlight)
        print(f"Meetings: {survival.total_meetings} sur {survival.total_games} parties")
        _print_frame("Survie aux meetings", meeting_survival_to_frame(survival.player_stats), args.limit)
    else:
        vs = compute_voting_stats(filtered)
        print(f"Votes: {vs.total_votes}, abstentions: {vs.total_abstentions} "
              f"(participation {vs.participation_rate:.1f}%)")
        behaviors = compute_player_voting_behavior(filtered, highlighted_player=args.highlight)
        _print_frame("Comportement de vote", player_voting_to_frame(behaviors), args.limit)
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Statistiques Lycans")
    parser.add_argument("--game-log", default=get_default_game_log_path(), help="Chemin de l'export JSON")
    parser.add_argument("--section", choices=SECTIONS, default="games")
    parser.add_argument("--player", help="Filtre joueur")
    parser.add_argument("--wins-only", action="store_true", help="Seulement les victoires du joueur")
    parser.add_argument("--camp", help="Filtre de camp (ex: Loup, Villageois, Autres)")
    parser.add_argument("--camp-mode", default="wins-only", choices=("wins-only", "all-assignments"))
    parser.add_argument("--exclude-wolf-sub-roles", action="store_true")
    parser.add_argument("--date", help="JJ/MM/AAAA ou MM/AAAA")
    parser.add_argument("--map-name", help="Carte (Village, Château, Autres)")
    parser.add_argument("--highlight", help="Joueur mis en avant")
    parser.add_argument("--death-camp", help="Camp analysé pour les morts")
    parser.add_argument("--matrix-by", default="victim_name", choices=MATRIX_COLUMNS, help="Colonnes de la matrice des kills")
    parser.add_argument("--survival-camp", help="villageois, loups ou solo")
    parser.add_argument("--limit", type=int, default=20, help="Nombre de lignes affichées")
    return run(parser.parse_args(argv))


if __name__ == "__main__":
    sys.exit(main())
