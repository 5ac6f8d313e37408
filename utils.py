# utils.py
"""
Utility functions for the simulation framework.

This module provides helper functions, such as logging setup, configuration
loading and parameter validation, that are used across different parts of
the application but do not belong to a specific domain like the circuit
model or rendering.
"""
import logging
import logging.handlers
import json
import math
import numbers
import os
from typing import Dict, Any

# --- Data Contracts ---
#
# setup_logging(config: Dict[str, Any]) -> None:
#   - Inputs:
#     - config: A dictionary containing a "logging" key with "level",
#       "format", and "log_file" sub-keys.
#   - Outputs: None
#   - Side Effects: Configures the root Python logger. Creates a log
#     directory if it doesn't exist. Sets up a console handler and a
#     rotating file handler.
#   - Invariants: After this function runs, the logging system is
#     initialized and ready for use throughout the application.
#
# require_positive(name: str, value: Any) -> float:
#   - Outputs: the value as a float.
#   - Raises: ValueError (logged as CRITICAL) if the value is not a finite
#     number strictly greater than zero.

def setup_logging(config: Dict[str, Any]) -> None:
    """
    Configures the logging system from a configuration dictionary.

    Sets up logging to both the console and a rotating file.
    """
    log_config = config.get('logging', {})
    log_level = log_config.get('level', 'INFO').upper()
    log_format = log_config.get('format', '%(asctime)s - %(levelname)s - %(message)s')
    log_file_path = log_config.get('log_file', 'logs/circuit.log')

    # Ensure the log directory exists
    log_dir = os.path.dirname(log_file_path)
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)

    logger = logging.getLogger()
    logger.setLevel(log_level)

    # Clear existing handlers to avoid duplication
    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = logging.Formatter(log_format)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    # Rotates when the log reaches 1MB, keeps 5 backup logs.
    file_handler = logging.handlers.RotatingFileHandler(
        log_file_path, maxBytes=1024*1024, backupCount=5
    )
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    logging.info("Logging system initialized.")
    logging.debug(f"Log level set to {log_level}.")
    logging.debug(f"Log file path: {log_file_path}")

def load_config(path: str) -> Dict[str, Any]:
    """Loads a JSON configuration file."""
    logging.info(f"Loading configuration from {path}...")
    try:
        with open(path, 'r', encoding='utf-8') as f:
            config = json.load(f)
        logging.info("Configuration loaded successfully.")
        return config
    except FileNotFoundError:
        logging.error(f"Configuration file not found at {path}.")
        raise
    except json.JSONDecodeError:
        logging.error(f"Error decoding JSON from {path}.")
        raise

def _fail(msg: str) -> None:
    logging.critical(msg)
    raise ValueError(msg)

def require_positive(name: str, value: Any) -> float:
    """Validates that a configuration constant is a finite number > 0."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        _fail(f"Configuration error: '{name}' must be a number, got {value!r}.")
    if not math.isfinite(value) or value <= 0:
        _fail(f"Configuration error: '{name}' must be positive and finite, got {value!r}.")
    return float(value)

def require_count(name: str, value: Any) -> int:
    """Validates that a population size is a positive integer."""
    if isinstance(value, bool) or not isinstance(value, numbers.Integral) or value <= 0:
        _fail(f"Configuration error: '{name}' must be a positive integer, got {value!r}.")
    return int(value)

def require_probability(name: str, value: Any) -> float:
    """Validates that a per-frame probability lies in (0, 1]."""
    value = require_positive(name, value)
    if value > 1.0:
        _fail(f"Configuration error: '{name}' must not exceed 1.0, got {value!r}.")
    return value
