import json
import logging
import math

import numpy as np
import pytest

from utils import load_config, require_count, require_positive, require_probability, setup_logging


def test_require_positive_accepts_numbers():
    assert require_positive("x", 3) == 3.0
    assert require_positive("x", 0.5) == 0.5


@pytest.mark.parametrize("bad", [0, -2, math.inf, math.nan, "1", None, False])
def test_require_positive_rejects(bad, caplog):
    with caplog.at_level(logging.CRITICAL):
        with pytest.raises(ValueError, match="'x'"):
            require_positive("x", bad)
    assert any(r.levelno == logging.CRITICAL for r in caplog.records)


def test_require_count():
    assert require_count("n", 10) == 10
    for bad in (0, -1, 1.0, True):
        with pytest.raises(ValueError):
            require_count("n", bad)


def test_require_probability():
    assert require_probability("p", 1.0) == 1.0
    with pytest.raises(ValueError):
        require_probability("p", 1.01)


def test_load_config(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"simulation_parameters": {"seed": 3}}), encoding="utf-8")
    assert load_config(str(path)) == {"simulation_parameters": {"seed": 3}}


def test_load_config_errors(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(str(tmp_path / "missing.json"))
    bad = tmp_path / "bad.json"
    bad.write_text("{not json", encoding="utf-8")
    with pytest.raises(json.JSONDecodeError):
        load_config(str(bad))


def test_setup_logging_creates_rotating_file(tmp_path):
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    log_file = tmp_path / "logs" / "run.log"
    try:
        setup_logging({"logging": {"level": "debug", "log_file": str(log_file)}})
        assert root.level == logging.DEBUG
        kinds = {type(h).__name__ for h in root.handlers}
        assert kinds == {"StreamHandler", "RotatingFileHandler"}
        for handler in root.handlers:
            handler.flush()
        assert "Logging system initialized." in log_file.read_text(encoding="utf-8")
    finally:
        for handler in root.handlers:
            handler.close()
        root.handlers = saved_handlers
        root.setLevel(saved_level)


def test_require_count_accepts_numpy_integers():
    assert require_count("n", np.int64(1000)) == 1000
    assert type(require_count("n", np.int32(5))) is int
    with pytest.raises(ValueError):
        require_count("n", np.float64(3.0))
    with pytest.raises(ValueError):
        require_count("n", np.int64(0))
