"""Tests pour le chargement du journal de parties."""

import json

import pytest

from lycans.config import LoaderConfig
from lycans.data.loaders import (
    GameLogError,
    game_log_from_dict,
    generate_displayed_ids,
    load_game_log,
    parse_game_id,
    player_stat_from_dict,
)


def _payload():
    return {
        "GameStats": [
            {
                "Id": "Ponce-20241005183000-2",
                "StartDate": "2024-10-05T18:30:00Z",
                "EndDate": "2024-10-05T19:00:00Z",
                "MapName": "Village",
                "HarvestGoal": 100,
                "HarvestDone": 40,
                "EndTiming": "Nuit 3",
                "Version": "0.201",
                "Modded": False,
                "LegacyData": {"VictoryType": "Votes", "DeathInformationFilled": True},
                "PlayerStats": [
                    {
                        "Username": "AncienPseudo",
                        "ID": "111",
                        "MainRoleInitial": "Villageois",
                        "MainRoleFinal": "Loup",
                        "Victorious": True,
                        "DeathTiming": "N2",
                        "DeathType": "Tué par Loup",
                        "KillerName": "Bob",
                        "Votes": [{"Target": "Bob"}, {"Target": "Passé"}],
                    },
                    {
                        "Username": "Bob",
                        "MainRoleInitial": "Loup",
                        "Victorious": "true",
                        "DeathTiming": "M2",
                        "DeathType": "VOTED",
                        "Votes": [{"Day": 1, "Target": "AncienPseudo"}],
                    },
                ],
            },
            {
                "Id": "Ponce-20241005183000-1",
                "StartDate": "2024-10-05T17:00:00Z",
                "EndDate": "2024-10-05T17:30:00Z",
                "MapName": "Château",
                "PlayerStats": [],
            },
            {
                "Id": "Nales-20250912210715",
                "StartDate": "2025-09-12T21:07:15Z",
                "PlayerStats": [],
            },
        ]
    }


class TestGameIds:
    def test_parse_game_id(self):
        assert parse_game_id("Ponce-20231013000000-1") == ("20231013000000", 1)
        assert parse_game_id("Nales-20250912210715") == ("20250912210715", 0)
        assert parse_game_id("n'importe") == ("0", 0)

    def test_generate_displayed_ids(self):
        ids = generate_displayed_ids(["Nales-20250912210715", "Ponce-20231013000000-2", "Ponce-20231013000000-1"])
        assert ids == {
            "Ponce-20231013000000-1": "1",
            "Ponce-20231013000000-2": "2",
            "Nales-20250912210715": "3",
        }


class TestGameLogFromDict:
    """Tests pour game_log_from_dict."""

    def test_unfinished_games_dropped(self):
        games = game_log_from_dict(_payload())
        assert [g.id for g in games] == ["Ponce-20241005183000-2", "Ponce-20241005183000-1"]

    def test_keep_unfinished_when_configured(self):
        games = game_log_from_dict(_payload(), config=LoaderConfig(drop_unfinished_games=False))
        assert len(games) == 3

    def test_displayed_ids_generated(self):
        games = game_log_from_dict(_payload())
        assert [g.displayed_id for g in games] == ["2", "1"]

    def test_existing_displayed_id_kept(self):
        payload = _payload()
        payload["GameStats"][0]["DisplayedId"] = "42"
        assert game_log_from_dict(payload)[0].displayed_id == "42"

    def test_legacy_fields(self):
        game = game_log_from_dict(_payload())[0]
        assert game.victory_type == "Votes"
        assert game.legacy_data.death_information_filled
        assert game.end_timing == "Nuit 3"
        assert game.harvest_done == pytest.approx(40.0)

        first = game.player_stats[0]
        assert [c.new_main_role for c in first.main_role_changes] == ["Loup"]
        assert first.death_type == "BY_WOLF"
        assert [(v.day, v.target) for v in first.votes] == [(1, "Bob"), (2, "Passé")]

        bob = game.player_stats[1]
        assert bob.victorious
        assert bob.main_role_changes == ()

    def test_aliases_rename_references(self):
        game = game_log_from_dict(_payload(), aliases={"111": "NouveauPseudo"})[0]
        assert game.player_stats[0].username == "NouveauPseudo"
        assert game.player_stats[1].votes[0].target == "NouveauPseudo"
        assert game.find_player("111") is game.player_stats[0]

    def test_plain_list_accepted(self):
        assert len(game_log_from_dict(_payload()["GameStats"])) == 2

    @pytest.mark.parametrize("payload", [{}, {"GameStats": "oops"}, 12])
    def test_unexpected_shape(self, payload):
        with pytest.raises(GameLogError):
            game_log_from_dict(payload)


class TestPlayerStatFromDict:
    def test_minimal(self):
        p = player_stat_from_dict({"Username": "Ponce", "MainRoleInitial": "Agent"})
        assert p.username == "Ponce"
        assert p.identifier == "Ponce"
        assert p.votes == ()
        assert p.death_type is None

    def test_actions(self):
        p = player_stat_from_dict({
            "Username": "Ponce",
            "MainRoleInitial": "Alchimiste",
            "Actions": [{
                "Date": "2024-10-05T18:40:00Z",
                "Timing": "N2",
                "ActionType": "DrinkPotion",
                "ActionName": "Hantée",
                "Position": {"x": 1, "y": 2.5, "z": "3"},
            }],
        })
        action = p.actions[0]
        assert action.action_type == "DrinkPotion"
        assert action.position == (1.0, 2.5, 3.0)
        assert action.action_target is None


class TestLoadGameLog:
    def test_load_file(self, tmp_path):
        path = tmp_path / "gameLog.json"
        path.write_text(json.dumps(_payload()), encoding="utf-8")
        assert len(load_game_log(str(path))) == 2

    def test_missing_file(self, tmp_path):
        with pytest.raises(GameLogError):
            load_game_log(str(tmp_path / "absent.json"))

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "gameLog.json"
        path.write_text("{pas du json", encoding="utf-8")
        with pytest.raises(GameLogError):
            load_game_log(str(path))
