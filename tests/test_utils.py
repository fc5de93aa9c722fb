import json
import logging
import logging.handlers
from pathlib import Path

import pytest

from utils import load_config, setup_logging


def test_load_config_reads_json_object(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"simulation_parameters": {"seed": 3}}))

    assert load_config(str(path)) == {"simulation_parameters": {"seed": 3}}


def test_load_config_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(str(tmp_path / "absent.json"))


def test_load_config_invalid_json(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("{not json")
    with pytest.raises(json.JSONDecodeError):
        load_config(str(path))


def test_load_config_requires_object(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("[1, 2, 3]")
    with pytest.raises(ValueError):
        load_config(str(path))


def test_shipped_config_loads():
    config = load_config(str(Path(__file__).resolve().parent.parent / "config.json"))
    params = config["simulation_parameters"]
    assert params["particle_count"] == 600
    assert len(params["interaction_matrix"]) == params["particle_types"]


def test_setup_logging_adds_rotating_file(tmp_path, restore_root_logger):
    log_file = tmp_path / "logs" / "sim.log"

    setup_logging({"logging": {"level": "debug", "log_file": str(log_file)}})
    logging.info("hello from the test")

    logger = restore_root_logger
    assert logger.level == logging.DEBUG
    assert any(isinstance(h, logging.handlers.RotatingFileHandler) for h in logger.handlers)
    for handler in logger.handlers:
        handler.flush()
    assert "hello from the test" in log_file.read_text()


def test_setup_logging_console_only(restore_root_logger):
    setup_logging({"logging": {"level": "WARNING", "log_file": ""}})

    handlers = restore_root_logger.handlers
    assert len(handlers) == 1
    assert not isinstance(handlers[0], logging.FileHandler)


def test_setup_logging_uses_configured_rotation(tmp_path, restore_root_logger):
    log_file = tmp_path / "sim.log"

    setup_logging({"logging": {"log_file": str(log_file), "max_bytes": 2048, "backup_count": 2}})

    rotating = [h for h in restore_root_logger.handlers
                if isinstance(h, logging.handlers.RotatingFileHandler)]
    assert len(rotating) == 1
    assert rotating[0].maxBytes == 2048
    assert rotating[0].backupCount == 2
