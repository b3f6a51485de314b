"""Module d'analyse des parties."""

from lycans.analysis.roles import (
    CampFamily,
    ROLE_TABLE,
    final_role,
    player_final_role,
    camp_from_role,
    main_camp_from_role,
    player_camp,
    winning_camp,
    did_camp_win,
)
from lycans.analysis.death_types import (
    DeathType,
    DeathCategory,
    is_attributable,
    category_of,
    codify_death_type,
)
from lycans.analysis.filters import (
    GamePredicate,
    build_game_predicates,
    apply_navigation_filters,
)
from lycans.analysis.game_details import (
    GameDetails,
    compute_game_details,
    game_details_to_frame,
)
from lycans.analysis.deaths import (
    KillRecord,
    DeathStatistics,
    compute_death_statistics,
    available_camps,
    kill_records_to_frame,
    kill_matrix,
    death_types_to_frame,
)
from lycans.analysis.meetings import (
    MeetingSurvivalStatistics,
    compute_meeting_survival,
    meeting_survival_to_frame,
)
from lycans.analysis.voting import (
    VotingStats,
    compute_voting_stats,
    compute_player_voting_behavior,
    compute_vote_targeting_analysis,
    compute_game_voting_analysis,
    compute_voting_accuracy,
    player_voting_to_frame,
    targeting_to_frame,
)

__all__ = [
    "CampFamily",
    "ROLE_TABLE",
    "final_role",
    "player_final_role",
    "camp_from_role",
    "main_camp_from_role",
    "player_camp",
    "winning_camp",
    "did_camp_win",
    "DeathType",
    "DeathCategory",
    "is_attributable",
    "category_of",
    "codify_death_type",
    "GamePredicate",
    "build_game_predicates",
    "apply_navigation_filters",
    "GameDetails",
    "compute_game_details",
    "game_details_to_frame",
    "KillRecord",
    "DeathStatistics",
    "compute_death_statistics",
    "available_camps",
    "kill_records_to_frame",
    "kill_matrix",
    "death_types_to_frame",
    "MeetingSurvivalStatistics",
    "compute_meeting_survival",
    "meeting_survival_to_frame",
    "VotingStats",
    "compute_voting_stats",
    "compute_player_voting_behavior",
    "compute_vote_targeting_analysis",
    "compute_game_voting_analysis",
    "compute_voting_accuracy",
    "player_voting_to_frame",
    "targeting_to_frame",
]
