import pytest

from patient_api import config


@pytest.fixture
def db_env(monkeypatch):
    monkeypatch.setenv("DB_HOST", "db.internal")
    monkeypatch.setenv("DB_PORT", "3307")
    monkeypatch.setenv("DB_USER", "app")
    monkeypatch.setenv("DB_PASSWORD", "secret")
    monkeypatch.setenv("DB_DATABASE", "hospital")


def test_database_settings(db_env):
    assert config.database_settings() == {
        "host": "db.internal",
        "port": 3307,
        "user": "app",
        "password": "secret",
        "database": "hospital",
    }


@pytest.mark.parametrize("name", ["DB_USER", "DB_PASSWORD", "DB_DATABASE"])
def test_missing_required_var(db_env, monkeypatch, name):
    monkeypatch.delenv(name)
    with pytest.raises(RuntimeError, match=name):
        config.database_settings()


def test_empty_value_counts_as_missing(db_env, monkeypatch):
    monkeypatch.setenv("DB_PASSWORD", "")
    with pytest.raises(RuntimeError, match="DB_PASSWORD"):
        config.database_settings()
