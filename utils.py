# utils.py
"""
Utility functions for the emitter application.

This module provides helper functions, such as logging setup and config
loading, that are used across the application but do not belong to the
geometry, physics or rendering code.
"""
import copy
import json
import logging
import logging.handlers
import os
from typing import Any, Dict

from constants import DEFAULT_CONFIG

# --- Data Contracts ---
#
# setup_logging(config: Dict[str, Any]) -> None:
#   - Inputs:
#     - config: A dictionary with an optional "logging" key holding "level",
#       "format" and "log_file" sub-keys. A null "log_file" disables the
#       file handler.
#   - Side Effects: Replaces the root logger's handlers with a console handler
#     and, when enabled, a rotating file handler. Creates the log directory.
#
# load_config(path: str) -> Dict[str, Any]:
#   - Outputs: The JSON config with DEFAULT_CONFIG filled in underneath it.
#   - Raises: FileNotFoundError, json.JSONDecodeError (logged first).


def setup_logging(config: Dict[str, Any]) -> None:
    """
    Configures the logging system from a configuration dictionary.

    Sets up logging to the console and, unless disabled, a rotating file.
    """
    defaults = DEFAULT_CONFIG['logging']
    log_config = config.get('logging', {})
    log_level = str(log_config.get('level', defaults['level'])).upper()
    log_format = log_config.get('format', defaults['format'])
    log_file_path = log_config.get('log_file', defaults['log_file'])

    logger = logging.getLogger()
    logger.setLevel(log_level)

    # Clear existing handlers to avoid duplication
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(log_format)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file_path:
        log_dir = os.path.dirname(log_file_path)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        # Rotates when the log reaches 1MB, keeps 5 backup logs.
        file_handler = logging.handlers.RotatingFileHandler(
            log_file_path, maxBytes=1024*1024, backupCount=5
        )
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logging.info("Logging system initialized.")
    logging.debug(f"Log level set to {log_level}.")
    logging.debug(f"Log file path: {log_file_path or 'disabled'}")


def merge_defaults(config: Dict[str, Any]) -> Dict[str, Any]:
    """Returns a copy of config with any missing section keys taken from DEFAULT_CONFIG."""
    merged = copy.deepcopy(DEFAULT_CONFIG)
    for section, values in config.items():
        if isinstance(values, dict) and isinstance(merged.get(section), dict):
            merged[section].update(values)
        else:
            merged[section] = values
    return merged


def load_config(path: str) -> Dict[str, Any]:
    """Loads a JSON configuration file and fills in defaults."""
    logging.info(f"Loading configuration from {path}...")
    try:
        with open(path, 'r') as f:
            config = json.load(f)
    except FileNotFoundError:
        logging.error(f"Configuration file not found at {path}.")
        raise
    except json.JSONDecodeError:
        logging.error(f"Error decoding JSON from {path}.")
        raise
    logging.info("Configuration loaded successfully.")
    return merge_defaults(config)
