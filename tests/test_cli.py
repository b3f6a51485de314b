"""Tests pour le script compute_stats."""

import json

from scripts.compute_stats import main


def _write_log(tmp_path):
    payload = {
        "GameStats": [
            {
                "Id": "Ponce-20241005183000-1",
                "StartDate": "2024-10-05T18:30:00Z",
                "EndDate": "2024-10-05T19:00:00Z",
                "MapName": "Village",
                "HarvestGoal": 100,
                "HarvestDone": 30,
                "EndTiming": "N3",
                "PlayerStats": [
                    {"Username": "Ponce", "MainRoleInitial": "Loup", "Victorious": True, "Votes": [{"Target": "Bob"}]},
                    {
                        "Username": "Bob",
                        "MainRoleInitial": "Villageois",
                        "DeathTiming": "M1",
                        "DeathType": "VOTED",
                        "Votes": [{"Target": "Passé"}],
                    },
                ],
            }
        ]
    }
    path = tmp_path / "gameLog.json"
    path.write_text(json.dumps(payload), encoding="utf-8")
    return str(path)


class TestComputeStatsCli:
    def test_games_section(self, tmp_path, capsys):
        assert main(["--game-log", _write_log(tmp_path), "--player", "Ponce", "--camp", "Loup"]) == 0
        out = capsys.readouterr().out
        assert "=== Parties ===" in out
        assert "Ponce, Bob" in out

    def test_voting_section(self, tmp_path, capsys):
        assert main(["--game-log", _write_log(tmp_path), "--section", "voting"]) == 0
        out = capsys.readouterr().out
        assert "Votes: 1, abstentions: 1" in out

    def test_meetings_section(self, tmp_path, capsys):
        assert main(["--game-log", _write_log(tmp_path), "--section", "meetings"]) == 0
        assert "Survie aux meetings" in capsys.readouterr().out

    def test_missing_file(self, tmp_path):
        assert main(["--game-log", str(tmp_path / "absent.json"), "--section", "deaths"]) == 1

    def test_deaths_section(self, tmp_path, capsys):
        assert main(["--game-log", _write_log(tmp_path), "--section", "deaths", "--matrix-by", "death_type"]) == 0
        out = capsys.readouterr().out
        assert "Causes de mort" in out
        assert "VOTED" in out
        # Un vote n'est pas un kill : matrice vide.
        assert "=== Kills par death_type ===\n(aucune donnée)" in out
