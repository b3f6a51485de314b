"""Tests pour l'analyse des votes."""

import pytest

from lycans.analysis.voting import (
    analyze_game_votes,
    analyze_meeting,
    compute_game_voting_analysis,
    compute_player_voting_behavior,
    compute_vote_targeting_analysis,
    compute_voting_accuracy,
    compute_voting_stats,
    player_voting_to_frame,
    targeting_to_frame,
)


@pytest.fixture
def voting_game(make_player, make_game):
    """Deux meetings : A est éliminé en M1, C s'abstient en M2."""
    return make_game("7", [
        make_player("A", "Villageois", death_timing="M1", death_type="VOTED", votes=["B"]),
        make_player("B", "Loup", victorious=True, votes=["A", "C"]),
        make_player("C", "Villageois", votes=["A", "Passé"]),
        make_player("D", "Traître", victorious=True, votes=["A", "C"]),
    ])


class TestVotingStats:
    def test_totals(self, voting_game, corpus):
        stats = compute_voting_stats([voting_game] + corpus)
        assert stats.total_votes == 6
        assert stats.total_abstentions == 1
        assert stats.games_with_votes == 1
        assert stats.participation_rate == pytest.approx(600 / 7)
        assert stats.average_votes_per_game == pytest.approx(6.0)

    def test_no_votes(self, corpus):
        stats = compute_voting_stats(corpus)
        assert stats.participation_rate == 0.0
        assert stats.average_abstentions_per_game == 0.0


class TestPlayerVotingBehavior:
    """Tests pour compute_player_voting_behavior."""

    def test_ordering(self, voting_game):
        behaviors = compute_player_voting_behavior([voting_game])
        assert [b.player_name for b in behaviors] == ["B", "D", "A", "C"]

    def test_role_breakdown(self, voting_game):
        by_name = {b.player_name: b for b in compute_player_voting_behavior([voting_game])}
        assert by_name["B"].as_loup.total_votes_cast == 2
        assert by_name["D"].as_loup.total_votes_cast == 2
        assert by_name["C"].as_villageois.total_abstentions == 1
        assert by_name["C"].as_other.games_participated == 0

    def test_player_rates(self, voting_game):
        by_name = {b.player_name: b for b in compute_player_voting_behavior([voting_game])}
        c = by_name["C"]
        assert c.participation_rate == pytest.approx(50.0)
        assert c.survived_to_meeting == [2]
        assert by_name["B"].most_targeted_player == "A"
        assert by_name["B"].targets_voted_count == 2

    def test_highlighted(self, voting_game):
        behaviors = compute_player_voting_behavior([voting_game], highlighted_player="d")
        assert [b.player_name for b in behaviors if b.highlighted] == ["D"]

    def test_frame(self, voting_game):
        df = player_voting_to_frame(compute_player_voting_behavior([voting_game]))
        assert list(df["player_name"]) == ["B", "D", "A", "C"]
        assert "participation_rate" in df.columns


class TestVoteTargeting:
    """Tests pour compute_vote_targeting_analysis."""

    def test_targets(self, voting_game):
        targets = compute_vote_targeting_analysis([voting_game])
        assert [(t.player_name, t.times_targeted) for t in targets] == [("A", 3), ("C", 2), ("B", 1)]

    def test_pressure_and_elimination(self, voting_game):
        a = compute_vote_targeting_analysis([voting_game])[0]
        assert a.targeted_by_camps == {"Loup": 2, "Villageois": 1}
        assert a.games_targeted == 1
        assert a.targeting_pressure == pytest.approx(3.0)
        assert a.eliminated_by_vote == 1
        assert a.most_frequent_attacker == "B"

    def test_not_eliminated(self, voting_game):
        c = compute_vote_targeting_analysis([voting_game])[1]
        assert c.eliminated_by_vote == 0

    def test_absent_target_ignored(self, make_player, make_game):
        game = make_game("1", [make_player("A", votes=["Fantôme"])])
        assert compute_vote_targeting_analysis([game]) == []

    def test_frame(self, voting_game):
        df = targeting_to_frame(compute_vote_targeting_analysis([voting_game]))
        assert list(df["times_targeted"]) == [3, 2, 1]


class TestMeetingAnalysis:
    """Tests pour analyze_meeting et analyze_game_votes."""

    def test_first_meeting(self, voting_game):
        m = analyze_meeting(voting_game, 0)
        assert m.meeting_number == 1
        assert m.total_participants == 4
        assert m.players_who_voted == ("A", "B", "C", "D")
        assert m.vote_targets == {"B": 1, "A": 3}
        assert m.most_targeted_player == "A"
        assert m.consensus_level == pytest.approx(0.75)
        assert m.participation_rate == pytest.approx(100.0)
        assert m.eliminated_player == "A"

    def test_second_meeting(self, voting_game):
        m = analyze_meeting(voting_game, 1)
        assert m.players_who_voted == ("B", "D")
        assert m.players_who_abstained == ("C",)
        assert m.consensus_level == pytest.approx(1.0)
        assert m.participation_rate == pytest.approx(200 / 3)
        assert m.eliminated_player is None

    def test_meeting_without_votes(self, voting_game):
        m = analyze_meeting(voting_game, 5)
        assert m.total_participants == 0
        assert m.most_targeted_player is None
        assert m.consensus_level == 0.0

    def test_game_analysis(self, voting_game):
        g = analyze_game_votes(voting_game)
        assert g.game_id == "7"
        assert g.total_meetings == 2
        assert len(g.meetings) == 2
        assert g.overall_participation == pytest.approx(600 / 7)
        assert g.most_active_voter == "B"
        assert g.most_targeted_player == "A"
        assert g.winning_camp == "Loup"
        assert g.voting_patterns_by_camp["Loup"].total_votes == 4
        assert g.voting_patterns_by_camp["Villageois"].total_abstentions == 1

    def test_game_analysis_list(self, voting_game, corpus):
        out = compute_game_voting_analysis(corpus + [voting_game])
        assert [g.game_id for g in out] == ["1", "2", "3", "7"]
        assert out[0].total_meetings == 0


class TestVotingAccuracy:
    def test_accuracy(self, voting_game):
        result = compute_voting_accuracy([voting_game])
        assert [a.player_name for a in result] == ["B", "D", "A", "C"]
        by_name = {a.player_name: a for a in result}
        assert by_name["B"].accuracy_rate == pytest.approx(100.0)
        assert by_name["C"].friendly_fire_rate == pytest.approx(100.0)
        assert by_name["C"].accuracy_rate == pytest.approx(0.0)
