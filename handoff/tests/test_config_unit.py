from pathlib import Path

from handoff.internal_core.config import load_config

_ENV_NAMES = (
    "HANDOFF_PARSE_WORKER_ENABLED",
    "HANDOFF_PARSE_TIMEOUT_SECONDS",
    "HANDOFF_PARSE_CACHE_SIZE",
    "HANDOFF_PARSE_CACHE_TTL_SECONDS",
    "HANDOFF_TEMPLATE_DIR",
    "HANDOFF_DATE_FORMAT",
    "HANDOFF_TIME_FORMAT",
    "HANDOFF_LOG_LEVEL",
)


def _clear_env(monkeypatch) -> None:
    for name in _ENV_NAMES:
        monkeypatch.delenv(name, raising=False)


def test_load_config_defaults(monkeypatch) -> None:
    _clear_env(monkeypatch)
    config = load_config()
    assert config.HANDOFF_PARSE_WORKER_ENABLED is True
    assert config.HANDOFF_PARSE_TIMEOUT_SECONDS == 10.0
    assert config.HANDOFF_PARSE_CACHE_SIZE == 50
    assert config.HANDOFF_PARSE_CACHE_TTL_SECONDS == 300.0
    assert config.HANDOFF_DATE_FORMAT == "%x"
    assert config.HANDOFF_TIME_FORMAT == "%H:%M"
    assert config.HANDOFF_LOG_LEVEL == "INFO"
    assert config.template_dir_path() == (Path(__file__).resolve().parents[1] / "note" / "templates")


def test_load_config_reads_environment(monkeypatch, tmp_path: Path) -> None:
    _clear_env(monkeypatch)
    monkeypatch.setenv("HANDOFF_PARSE_WORKER_ENABLED", "off")
    monkeypatch.setenv("HANDOFF_PARSE_TIMEOUT_SECONDS", "2.5")
    monkeypatch.setenv("HANDOFF_PARSE_CACHE_SIZE", "7")
    monkeypatch.setenv("HANDOFF_PARSE_CACHE_TTL_SECONDS", "0")
    monkeypatch.setenv("HANDOFF_TEMPLATE_DIR", str(tmp_path))
    monkeypatch.setenv("HANDOFF_DATE_FORMAT", "%Y-%m-%d")
    monkeypatch.setenv("HANDOFF_LOG_LEVEL", "debug")

    config = load_config()
    assert config.HANDOFF_PARSE_WORKER_ENABLED is False
    assert config.HANDOFF_PARSE_TIMEOUT_SECONDS == 2.5
    assert config.HANDOFF_PARSE_CACHE_SIZE == 7
    assert config.HANDOFF_PARSE_CACHE_TTL_SECONDS == 0.0
    assert config.template_dir_path() == tmp_path.resolve()
    assert config.HANDOFF_DATE_FORMAT == "%Y-%m-%d"
    assert config.HANDOFF_LOG_LEVEL == "debug"


def test_non_positive_timeout_disables_it(monkeypatch) -> None:
    _clear_env(monkeypatch)
    monkeypatch.setenv("HANDOFF_PARSE_TIMEOUT_SECONDS", "0")
    assert load_config().HANDOFF_PARSE_TIMEOUT_SECONDS is None
