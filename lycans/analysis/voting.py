"""Analyse des votes en meeting.

Un vote dont la cible est "Passé" est une abstention explicite ; tout autre
vote vise un joueur de la partie.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import pandas as pd

from lycans.analysis.meetings import died_at_meeting
from lycans.analysis.roles import main_camp_from_role, player_camp, player_final_role, winning_camp
from lycans.config import ABSTENTION_TARGET, CAMPS
from lycans.models import GameLogEntry, PlayerStat, Vote


def is_abstention(vote: Vote) -> bool:
    return vote.target == ABSTENTION_TARGET


def _most_common(counter: Counter) -> Optional[str]:
    """Clé la plus fréquente (première rencontrée en cas d'égalité)."""
    best: Optional[str] = None
    best_count = 0
    for key, count in counter.items():
        if count > best_count:
            best, best_count = key, count
    return best


def _rate(part: int, total: int) -> float:
    return (part / total * 100.0) if total > 0 else 0.0


# =============================================================================
# Statistiques globales
# =============================================================================

@dataclass(frozen=True)
class VotingStats:
    total_votes: int
    total_abstentions: int
    games_with_votes: int

    @property
    def participation_rate(self) -> float:
        """Part des votes exprimés parmi votes + abstentions (en %)."""
        return _rate(self.total_votes, self.total_votes + self.total_abstentions)

    @property
    def average_votes_per_game(self) -> float:
        return self.total_votes / self.games_with_votes if self.games_with_votes else 0.0

    @property
    def average_abstentions_per_game(self) -> float:
        return self.total_abstentions / self.games_with_votes if self.games_with_votes else 0.0


def compute_voting_stats(games: Iterable[GameLogEntry]) -> VotingStats:
    """Totaux de votes et d'abstentions sur l'ensemble des parties."""
    votes = abstentions = games_with_votes = 0
    for game in games:
        has_votes = False
        for p in game.player_stats:
            if p.votes:
                has_votes = True
            for v in p.votes:
                if is_abstention(v):
                    abstentions += 1
                else:
                    votes += 1
        if has_votes:
            games_with_votes += 1
    return VotingStats(total_votes=votes, total_abstentions=abstentions, games_with_votes=games_with_votes)


# =============================================================================
# Comportement de vote par joueur
# =============================================================================

@dataclass
class RoleVotingBehavior:
    """Votes d'un joueur pour un camp donné (Villageois / Loup / autre)."""
    total_votes_cast: int = 0
    total_abstentions: int = 0
    games_participated: int = 0
    targets_voted: Counter = field(default_factory=Counter)


@dataclass
class PlayerVotingBehavior:
    """Comportement de vote d'un joueur sur toutes les parties.

    Attributes:
        survived_to_meeting: Nombre de meetings atteints, par partie.
        role_behavior: Ventilation "villageois" / "loup" / "other" selon le
            camp de fin de partie.
    """
    player_id: str
    player_name: str
    total_votes_cast: int = 0
    total_abstentions: int = 0
    games_participated: int = 0
    targets_voted: Counter = field(default_factory=Counter)
    survived_to_meeting: List[int] = field(default_factory=list)
    role_behavior: Dict[str, RoleVotingBehavior] = field(
        default_factory=lambda: {k: RoleVotingBehavior() for k in ("villageois", "loup", "other")}
    )
    highlighted: bool = False

    @property
    def participation_rate(self) -> float:
        return _rate(self.total_votes_cast, self.total_votes_cast + self.total_abstentions)

    @property
    def average_votes_per_game(self) -> float:
        return self.total_votes_cast / self.games_participated if self.games_participated else 0.0

    @property
    def most_targeted_player(self) -> Optional[str]:
        return _most_common(self.targets_voted)

    @property
    def targets_voted_count(self) -> int:
        return len(self.targets_voted)

    @property
    def as_villageois(self) -> RoleVotingBehavior:
        return self.role_behavior["villageois"]

    @property
    def as_loup(self) -> RoleVotingBehavior:
        return self.role_behavior["loup"]

    @property
    def as_other(self) -> RoleVotingBehavior:
        return self.role_behavior["other"]


def _role_key(player: PlayerStat) -> str:
    camp = player_camp(player, regroup_wolf_sub_roles=True)
    if camp == CAMPS.VILLAGEOIS:
        return "villageois"
    if camp == CAMPS.LOUP:
        return "loup"
    return "other"


def compute_player_voting_behavior(
    games: Iterable[GameLogEntry],
    *,
    highlighted_player: Optional[str] = None,
) -> List[PlayerVotingBehavior]:
    """Agrège le comportement de vote de chaque joueur.

    Seules les parties où le joueur a au moins un vote enregistré comptent.
    Résultat trié par nombre de votes exprimés décroissant.
    """
    players: Dict[str, PlayerVotingBehavior] = {}
    for game in games:
        for p in game.player_stats:
            if not p.votes:
                continue
            b = players.setdefault(p.identifier, PlayerVotingBehavior(p.identifier, p.username))
            b.player_name = p.username
            b.games_participated += 1
            b.survived_to_meeting.append(len(p.votes))

            rb = b.role_behavior[_role_key(p)]
            rb.games_participated += 1
            for v in p.votes:
                if is_abstention(v):
                    b.total_abstentions += 1
                    rb.total_abstentions += 1
                else:
                    b.total_votes_cast += 1
                    b.targets_voted[v.target] += 1
                    rb.total_votes_cast += 1
                    rb.targets_voted[v.target] += 1

    needle = (highlighted_player or "").lower()
    result = list(players.values())
    for b in result:
        b.highlighted = bool(needle) and b.player_name.lower() == needle
    result.sort(key=lambda b: (-b.total_votes_cast, b.player_name.lower()))
    return result


# =============================================================================
# Ciblage
# =============================================================================

@dataclass
class VoteTargetingAnalysis:
    """Pression de vote subie par un joueur.

    Attributes:
        targeted_by_camps: Votes reçus par camp principal de l'attaquant.
        targeting_pressure: Votes reçus par partie où le joueur a été visé.
        eliminated_by_vote: Parties où le joueur visé a été éliminé au vote.
    """
    player_id: str
    player_name: str
    times_targeted: int = 0
    targeted_by_players: Counter = field(default_factory=Counter)
    targeted_by_camps: Counter = field(default_factory=Counter)
    games_targeted: int = 0
    eliminated_by_vote: int = 0

    @property
    def targeting_pressure(self) -> float:
        return self.times_targeted / self.games_targeted if self.games_targeted else 0.0

    @property
    def most_frequent_attacker(self) -> Optional[str]:
        return _most_common(self.targeted_by_players)


def compute_vote_targeting_analysis(games: Iterable[GameLogEntry]) -> List[VoteTargetingAnalysis]:
    """Agrège les votes reçus par chaque joueur (joueurs jamais visés exclus)."""
    targets: Dict[str, VoteTargetingAnalysis] = {}
    for game in games:
        meetings_targeted: Dict[str, set] = {}
        for voter in game.player_stats:
            voter_camp = main_camp_from_role(player_final_role(voter))
            for v in voter.votes:
                if is_abstention(v):
                    continue
                target = game.find_player(v.target)
                if target is None:
                    continue
                t = targets.setdefault(target.identifier, VoteTargetingAnalysis(target.identifier, target.username))
                t.player_name = target.username
                t.times_targeted += 1
                t.targeted_by_players[voter.username] += 1
                t.targeted_by_camps[voter_camp] += 1
                meetings_targeted.setdefault(target.identifier, set()).add(v.day)

        for tid, meetings in meetings_targeted.items():
            t = targets[tid]
            t.games_targeted += 1
            target = game.find_player(tid)
            if target is not None and any(died_at_meeting(target, m) for m in meetings):
                t.eliminated_by_vote += 1

    result = [t for t in targets.values() if t.times_targeted > 0]
    result.sort(key=lambda t: (-t.times_targeted, t.player_name.lower()))
    return result


# =============================================================================
# Analyse par partie
# =============================================================================

@dataclass(frozen=True)
class MeetingVoteAnalysis:
    """Déroulé d'un meeting.

    Attributes:
        participation_rate: Votants / participants (en %).
        consensus_level: Part des votes exprimés portée par le joueur le plus
            visé (0 sans vote).
        eliminated_player: Joueur le plus visé, s'il a été éliminé au vote.
    """
    meeting_number: int
    total_participants: int
    total_votes_cast: int
    total_abstentions: int
    players_who_voted: Tuple[str, ...]
    players_who_abstained: Tuple[str, ...]
    vote_targets: Dict[str, int]
    most_targeted_player: Optional[str]
    consensus_level: float
    eliminated_player: Optional[str] = None

    @property
    def participation_rate(self) -> float:
        return _rate(self.total_votes_cast, self.total_participants)


@dataclass(frozen=True)
class CampVotingPattern:
    total_votes: int = 0
    total_abstentions: int = 0

    @property
    def participation_rate(self) -> float:
        return _rate(self.total_votes, self.total_votes + self.total_abstentions)


@dataclass(frozen=True)
class GameVotingAnalysis:
    game_id: str
    game_date: str
    total_meetings: int
    meetings: Tuple[MeetingVoteAnalysis, ...]
    overall_participation: float
    most_active_voter: Optional[str]
    most_targeted_player: Optional[str]
    winning_camp: str
    voting_patterns_by_camp: Dict[str, CampVotingPattern]


def analyze_meeting(game: GameLogEntry, meeting_index: int) -> MeetingVoteAnalysis:
    """Analyse le meeting à la position `meeting_index` (0 = premier meeting)."""
    voters: List[str] = []
    abstainers: List[str] = []
    targets: Counter = Counter()
    for p in game.player_stats:
        if meeting_index >= len(p.votes):
            continue
        vote = p.votes[meeting_index]
        if is_abstention(vote):
            abstainers.append(p.username)
        else:
            voters.append(p.username)
            targets[vote.target] += 1

    total_votes = len(voters)
    most_targeted = _most_common(targets)
    consensus = (targets[most_targeted] / total_votes) if (most_targeted and total_votes) else 0.0

    meeting_number = meeting_index + 1
    eliminated = None
    if most_targeted:
        target = game.find_player(most_targeted)
        if target is not None and died_at_meeting(target, meeting_number):
            eliminated = target.username

    return MeetingVoteAnalysis(
        meeting_number=meeting_number,
        total_participants=len(voters) + len(abstainers),
        total_votes_cast=total_votes,
        total_abstentions=len(abstainers),
        players_who_voted=tuple(voters),
        players_who_abstained=tuple(abstainers),
        vote_targets=dict(targets),
        most_targeted_player=most_targeted,
        consensus_level=consensus,
        eliminated_player=eliminated,
    )


def analyze_game_votes(game: GameLogEntry) -> GameVotingAnalysis:
    """Analyse complète des votes d'une partie."""
    total_meetings = max((len(p.votes) for p in game.player_stats), default=0)
    meetings = tuple(analyze_meeting(game, i) for i in range(total_meetings))

    all_votes = [v for p in game.player_stats for v in p.votes]
    cast = [v for v in all_votes if not is_abstention(v)]

    vote_counts = Counter()
    for p in game.player_stats:
        vote_counts[p.username] = sum(1 for v in p.votes if not is_abstention(v))
    most_active = _most_common(vote_counts)

    patterns: Dict[str, Counter] = {}
    for p in game.player_stats:
        camp = player_camp(p, regroup_wolf_sub_roles=True)
        c = patterns.setdefault(camp, Counter())
        for v in p.votes:
            c["abstentions" if is_abstention(v) else "votes"] += 1

    return GameVotingAnalysis(
        game_id=game.displayed_id,
        game_date=game.start_date,
        total_meetings=total_meetings,
        meetings=meetings,
        overall_participation=_rate(len(cast), len(all_votes)),
        most_active_voter=most_active,
        most_targeted_player=_most_common(Counter(v.target for v in cast)),
        winning_camp=winning_camp(game),
        voting_patterns_by_camp={
            camp: CampVotingPattern(c["votes"], c["abstentions"]) for camp, c in patterns.items()
        },
    )


def compute_game_voting_analysis(games: Sequence[GameLogEntry]) -> List[GameVotingAnalysis]:
    return [analyze_game_votes(g) for g in games]


# =============================================================================
# Précision des votes
# =============================================================================

@dataclass
class VotingAccuracy:
    """Votes contre un camp adverse vs votes contre son propre camp."""
    player_id: str
    player_name: str
    total_votes: int = 0
    votes_for_enemy_camp: int = 0
    votes_for_own_camp: int = 0

    @property
    def accuracy_rate(self) -> float:
        return _rate(self.votes_for_enemy_camp, self.total_votes)

    @property
    def friendly_fire_rate(self) -> float:
        return _rate(self.votes_for_own_camp, self.total_votes)


def compute_voting_accuracy(games: Iterable[GameLogEntry]) -> List[VotingAccuracy]:
    """Précision de vote par joueur, triée par taux de précision décroissant.

    Les camps sont ceux de fin de partie, sous-rôles loups regroupés. Un vote
    contre un joueur absent de la partie n'est pas classé.
    """
    stats: Dict[str, VotingAccuracy] = {}
    for game in games:
        for voter in game.player_stats:
            voter_camp = player_camp(voter, regroup_wolf_sub_roles=True)
            for v in voter.votes:
                if is_abstention(v):
                    continue
                target = game.find_player(v.target)
                if target is None:
                    continue
                a = stats.setdefault(voter.identifier, VotingAccuracy(voter.identifier, voter.username))
                a.player_name = voter.username
                a.total_votes += 1
                if player_camp(target, regroup_wolf_sub_roles=True) == voter_camp:
                    a.votes_for_own_camp += 1
                else:
                    a.votes_for_enemy_camp += 1

    result = list(stats.values())
    result.sort(key=lambda a: (-a.accuracy_rate, -a.total_votes, a.player_name.lower()))
    return result


# =============================================================================
# Vues tabulaires
# =============================================================================

def player_voting_to_frame(behaviors: Iterable[PlayerVotingBehavior]) -> pd.DataFrame:
    """DF une ligne par joueur (votes, abstentions, taux, cible favorite)."""
    rows = [
        {
            "player_id": b.player_id,
            "player_name": b.player_name,
            "total_votes_cast": b.total_votes_cast,
            "total_abstentions": b.total_abstentions,
            "participation_rate": b.participation_rate,
            "average_votes_per_game": b.average_votes_per_game,
            "most_targeted_player": b.most_targeted_player,
            "targets_voted_count": b.targets_voted_count,
            "games_participated": b.games_participated,
        }
        for b in behaviors
    ]
    return pd.DataFrame(rows)


def targeting_to_frame(targets: Iterable[VoteTargetingAnalysis]) -> pd.DataFrame:
    rows = [
        {
            "player_id": t.player_id,
            "player_name": t.player_name,
            "times_targeted": t.times_targeted,
            "games_targeted": t.games_targeted,
            "targeting_pressure": t.targeting_pressure,
            "most_frequent_attacker": t.most_frequent_attacker,
            "eliminated_by_vote": t.eliminated_by_vote,
        }
        for t in targets
    ]
    return pd.DataFrame(rows)
