"""Tests for environment-driven settings."""

from pathlib import Path

from matchbook.config import MatchingConfig, Settings
from matchbook.domain.entities import MatchCriteria, MatchLevel


def test_defaults(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)

    settings = Settings()

    assert settings.storage.data_dir == Path("data")
    assert settings.storage.verified_matches_file == "verified_matches.json"
    assert settings.storage.manual_map_file == "manual_track_map.json"
    assert settings.matching.item_match_level == MatchLevel.DEFAULT
    assert settings.matching.item_match_criteria == MatchCriteria.TRACK_NAME
    assert settings.search.result_limit == 20
    assert settings.search.max_query_length == 50


def test_nested_environment_overrides(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("STORAGE__DATA_DIR", str(tmp_path / "matches"))
    monkeypatch.setenv("MATCHING__ITEM_MATCH_LEVEL", "Strict")
    monkeypatch.setenv("MATCHING__ITEM_MATCH_CRITERIA", "TrackName, Artists")
    monkeypatch.setenv("JELLYFIN__API_KEY", "secret")

    settings = Settings()

    assert settings.storage.data_dir == tmp_path / "matches"
    assert settings.matching.item_match_level == MatchLevel.STRICT
    assert settings.matching.item_match_criteria == MatchCriteria.TRACK_NAME | MatchCriteria.ARTISTS
    assert settings.jellyfin.api_key == "secret"


def test_matching_level_is_case_insensitive(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("MATCHING__ITEM_MATCH_LEVEL", "strict")

    assert Settings().matching.item_match_level == MatchLevel.STRICT
    assert MatchingConfig(item_match_level="LOOSE").item_match_level == MatchLevel.LOOSE


def test_matching_config_accepts_integer_criteria():
    config = MatchingConfig(item_match_criteria=6)

    assert config.item_match_criteria == MatchCriteria.ALBUM_NAME | MatchCriteria.ARTISTS
