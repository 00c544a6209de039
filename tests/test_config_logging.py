import logging
from logging.handlers import RotatingFileHandler, TimedRotatingFileHandler

import pytest

from exotab.config import Settings, get_settings
from exotab.exceptions import CleaningError, ExotabError, PipelineError, TrainingPreconditionError
from exotab.logging_utils import log_data_action, setup_logging


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)


def test_settings_defaults():
    settings = Settings()
    assert settings.CATEGORICAL_MAX_UNIQUE == 20
    assert settings.DEFAULT_RARE_THRESHOLD == 5.0
    assert settings.MISSING_SENTINEL == -999.0
    assert settings.RARE_CATEGORY_LABEL == "Others"
    assert get_settings() is get_settings()


def test_settings_read_environment(monkeypatch):
    monkeypatch.setenv("EXOTAB_HTTP_TIMEOUT", "5")
    monkeypatch.setenv("EXOTAB_LOG_LEVEL", "debug")
    settings = Settings()
    assert settings.HTTP_TIMEOUT == 5.0
    assert settings.LOG_LEVEL == "DEBUG"


def test_settings_reject_unknown_level(monkeypatch):
    monkeypatch.setenv("EXOTAB_LOG_LEVEL", "chatty")
    with pytest.raises(ValueError):
        Settings()


def test_log_data_action(caplog):
    with caplog.at_level(logging.INFO, logger="data_actions"):
        log_data_action("clean", details="15 -> 10 rows")
        log_data_action("train", success=False, details="boom")

    first, second = caplog.records
    assert first.levelno == logging.INFO
    assert first.getMessage() == "Action: clean | Details: 15 -> 10 rows | Status: SUCCESS"
    assert second.levelno == logging.ERROR
    assert second.getMessage().endswith("Status: FAILED")


def test_setup_logging_installs_handlers(tmp_path, restore_root_logger):
    log_file = tmp_path / "logs" / "exotab.log"
    setup_logging(log_file=str(log_file), log_level="DEBUG")
    setup_logging(log_file=str(log_file), log_level="DEBUG")

    handlers = restore_root_logger.handlers
    assert len(handlers) == 2
    assert any(isinstance(h, RotatingFileHandler) for h in handlers)
    assert restore_root_logger.level == logging.DEBUG
    assert log_file.exists()
    assert logging.getLogger("httpx").level == logging.WARNING


def test_setup_logging_timed_rotation(tmp_path, restore_root_logger):
    setup_logging(log_file=str(tmp_path / "t.log"), rotation_type="time")
    assert any(isinstance(h, TimedRotatingFileHandler) for h in restore_root_logger.handlers)


def test_exception_details():
    err = CleaningError("clean", "bad frame", {"rows": 3})
    assert isinstance(err, PipelineError) and isinstance(err, ExotabError)
    assert err.message == "clean failed: bad frame"
    assert err.details == {"operation": "clean", "rows": 3}

    missing = TrainingPreconditionError("Columns not found", missing_columns=["x"])
    assert missing.details == {"missing_columns": ["x"]}
