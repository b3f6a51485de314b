"""Module de chargement et de parsing du journal de parties."""

from lycans.data.loaders import (
    GameLogError,
    game_entry_from_dict,
    game_log_from_dict,
    generate_displayed_ids,
    load_game_log,
    player_stat_from_dict,
)
from lycans.data.parsers import (
    format_display_date,
    parse_end_timing_day,
    parse_iso_utc,
    parse_timing_code,
)

__all__ = [
    "GameLogError",
    "game_entry_from_dict",
    "game_log_from_dict",
    "generate_displayed_ids",
    "load_game_log",
    "player_stat_from_dict",
    "format_display_date",
    "parse_end_timing_day",
    "parse_iso_utc",
    "parse_timing_code",
]
