"""Tests pour la configuration."""

import os

from lycans.config import NO_DEATH_MARKERS, get_default_game_log_path, get_repo_root


class TestPaths:
    def test_repo_root_contains_package(self):
        root = get_repo_root()
        assert os.path.isfile(os.path.join(root, "pyproject.toml"))
        assert os.path.isdir(os.path.join(root, "lycans"))

    def test_default_game_log_path(self, monkeypatch):
        monkeypatch.delenv("LYCANS_GAMELOG_PATH", raising=False)
        assert get_default_game_log_path() == os.path.join(get_repo_root(), "data", "gameLog.json")

    def test_game_log_path_override(self, monkeypatch):
        monkeypatch.setenv("LYCANS_GAMELOG_PATH", "/tmp/export.json")
        assert get_default_game_log_path() == "/tmp/export.json"


def test_no_death_markers():
    assert "SURVIVOR" in NO_DEATH_MARKERS
    assert "" in NO_DEATH_MARKERS
