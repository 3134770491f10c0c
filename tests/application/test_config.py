from pathlib import Path

import pytest

from kartei.application.config import AppConfig, find_config_file, resolve_config
from kartei.domain.exceptions import ConfigError
from kartei.domain.models import SchedulerParams, SessionMix


def test_defaults(mock_home):
    config = resolve_config()

    assert config.backend == "file"
    assert config.store_path == mock_home / ".config/kartei/cards.json"
    assert config.session_limit == 20
    assert config.seed is None
    assert config.learning_steps == [1, 6]
    assert config.to_scheduler_params() == SchedulerParams()
    assert config.to_session_mix() == SessionMix()


def test_no_config_file(mock_home):
    assert find_config_file() is None


def test_toml_file_is_loaded(mock_home):
    cfg_dir = mock_home / ".config/kartei"
    cfg_dir.mkdir(parents=True)
    (cfg_dir / "config.toml").write_text(
        'session_limit = 40\nlearning_steps = [1, 3, 7]\nstore_path = "~/decks/german.json"\n'
    )

    config = resolve_config()

    assert find_config_file() == cfg_dir / "config.toml"
    assert config.session_limit == 40
    assert config.to_scheduler_params().learning_steps == (1, 3, 7)
    assert config.store_path == Path(mock_home) / "decks/german.json"


def test_dotfile_fallback(mock_home):
    (mock_home / ".kartei.toml").write_text("seed = 7\n")
    assert resolve_config().seed == 7


def test_env_overrides_toml(mock_home, monkeypatch):
    (mock_home / ".kartei.toml").write_text("session_limit = 40\n")
    monkeypatch.setenv("KARTEI_SESSION_LIMIT", "15")

    assert resolve_config().session_limit == 15


def test_cli_overrides_env(mock_home, monkeypatch):
    monkeypatch.setenv("KARTEI_SESSION_LIMIT", "15")
    monkeypatch.setenv("KARTEI_BACKEND", "memory")

    config = resolve_config({"session_limit": 5, "backend": None})

    assert config.session_limit == 5
    assert config.backend == "memory"


def test_env_list_is_json(mock_home, monkeypatch):
    monkeypatch.setenv("KARTEI_LEARNING_STEPS", "[2, 5]")
    assert resolve_config().learning_steps == [2, 5]


@pytest.mark.parametrize(
    "overrides",
    [
        {"session_limit": 0},
        {"learning_steps": []},
        {"learning_steps": [1, 0]},
        {"minimum_ease": 3.0},
        {"hard_modifier": 1.2},
        {"easy_modifier": 0.9},
        {"learning_share": 0.6, "review_share": 0.6},
        {"backend": "redis"},
    ],
)
def test_invalid_values_raise_config_error(mock_home, overrides):
    with pytest.raises(ConfigError):
        resolve_config(overrides)


def test_model_can_be_built_directly(mock_home):
    config = AppConfig(backend="memory", store_path="~/x.json")
    assert config.store_path == mock_home / "x.json"
