import json
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from quizdeck import config as config_module
from quizdeck.config import SessionConfig, clear_config_cache, configure_logging, load_config


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    monkeypatch.delenv("QUIZDECK_CONFIG", raising=False)
    monkeypatch.delenv("QUIZDECK_SEED", raising=False)
    clear_config_cache()
    yield
    clear_config_cache()


def test_defaults_when_no_file(tmp_path, monkeypatch):
    monkeypatch.setattr(config_module, "CONFIG_FILE", tmp_path / "missing.json")
    config = load_config()

    assert config == SessionConfig()
    assert config.wrong_pair_cooldown == 0.8
    assert config.clock_interval == 0.1
    assert config.distractor_count == 3
    assert config.seed is None


def test_load_from_explicit_file(tmp_path):
    path = tmp_path / "session.json"
    path.write_text(json.dumps({"wrong_pair_cooldown": 1.5, "seed": "11", "unknown": True}), encoding="utf-8")

    config = load_config(str(path))
    assert config.wrong_pair_cooldown == 1.5
    assert config.seed == 11
    assert config.clock_interval == 0.1


def test_default_file_location_is_used(tmp_path, monkeypatch):
    path = tmp_path / "session.json"
    path.write_text('{"distractor_count": 2}', encoding="utf-8")
    monkeypatch.setattr(config_module, "CONFIG_FILE", path)

    assert load_config().distractor_count == 2


def test_default_file_does_not_depend_on_working_directory(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    assert config_module.CONFIG_FILE == ROOT / "res" / "config" / "session.json"
    assert config_module.CONFIG_FILE.exists()
    assert load_config() == SessionConfig()


def test_env_path_must_exist(tmp_path, monkeypatch):
    monkeypatch.setenv("QUIZDECK_CONFIG", str(tmp_path / "missing.json"))
    with pytest.raises(FileNotFoundError):
        load_config()


def test_seed_env_overrides_file(tmp_path, monkeypatch):
    path = tmp_path / "session.json"
    path.write_text('{"seed": 1}', encoding="utf-8")
    monkeypatch.setenv("QUIZDECK_SEED", "99")

    assert load_config(str(path)).seed == 99


@pytest.mark.parametrize(
    "payload",
    [
        {"wrong_pair_cooldown": 0},
        {"clock_interval": -1},
        {"distractor_count": 0},
        {"flip_delay": -0.1},
    ],
)
def test_invalid_values_are_rejected(tmp_path, payload):
    path = tmp_path / "session.json"
    path.write_text(json.dumps(payload), encoding="utf-8")
    with pytest.raises(ValueError):
        load_config(str(path))


def test_non_object_payload_is_rejected(tmp_path):
    path = tmp_path / "session.json"
    path.write_text("[1, 2]", encoding="utf-8")
    with pytest.raises(ValueError):
        load_config(str(path))


def test_make_rng_is_seeded_only_when_requested():
    seeded = SessionConfig(seed=3)
    assert seeded.make_rng().random() == seeded.make_rng().random()
    assert SessionConfig().make_rng() is not SessionConfig().make_rng()


@pytest.mark.parametrize("environment", ["development", "production"])
def test_configure_logging_accepts_environments(environment):
    configure_logging(environment)
