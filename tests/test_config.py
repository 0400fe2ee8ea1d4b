import pytest

from infra import config


def test_database_url_defaults_to_user_data_dir(monkeypatch, tmp_path):
    monkeypatch.delenv("TODO_PLANNER_DB_URL", raising=False)
    monkeypatch.setattr(config, "default_db_path", lambda: tmp_path / "todo_planner.db")

    assert config.database_url() == f"sqlite:///{(tmp_path / 'todo_planner.db').as_posix()}"


def test_database_url_env_override(monkeypatch):
    monkeypatch.setenv("TODO_PLANNER_DB_URL", "  sqlite:///:memory:  ")
    assert config.database_url() == "sqlite:///:memory:"


def test_pexels_api_key_blank_means_disabled(monkeypatch):
    monkeypatch.setenv("PEXELS_API_KEY", "   ")
    assert config.pexels_api_key() is None
    monkeypatch.setenv("PEXELS_API_KEY", "abc")
    assert config.pexels_api_key() == "abc"


def test_interval_settings_defaults_and_overrides(monkeypatch):
    monkeypatch.delenv("TODO_PLANNER_CACHE_TTL_SECONDS", raising=False)
    monkeypatch.delenv("TODO_PLANNER_RECALC_INTERVAL_SECONDS", raising=False)
    assert config.critical_path_cache_ttl() == 5.0
    assert config.recalculation_interval() == 1.0

    monkeypatch.setenv("TODO_PLANNER_CACHE_TTL_SECONDS", "0.5")
    monkeypatch.setenv("TODO_PLANNER_RECALC_INTERVAL_SECONDS", "3")
    assert config.critical_path_cache_ttl() == 0.5
    assert config.recalculation_interval() == 3.0


@pytest.mark.parametrize("raw", ["soon", "-1"])
def test_interval_settings_reject_bad_values(monkeypatch, raw):
    monkeypatch.setenv("TODO_PLANNER_CACHE_TTL_SECONDS", raw)
    with pytest.raises(ValueError):
        config.critical_path_cache_ttl()
