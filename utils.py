# utils.py
"""
Utility functions for the engine's driver.

This module provides helpers for logging setup and configuration
loading that are used by the batch driver but do not belong to the
engine, the renderer or the exporters.
"""
import logging
import logging.handlers
import json
import os
from typing import Any, Dict, Optional, Tuple

# --- Data Contracts ---
#
# setup_logging(config: Dict[str, Any]) -> None:
#   - Inputs:
#     - config: A dictionary with an optional "logging" key holding
#       "level", "format" and "log_file" sub-keys.
#   - Outputs: None
#   - Side Effects: Configures the root Python logger with a console
#     handler and a rotating file handler. Creates the log directory.
#
# load_config(path: str) -> Dict[str, Any]:
#   - Outputs: The parsed JSON object.
#   - Side Effects: Logs and re-raises FileNotFoundError and
#     json.JSONDecodeError. Raises ValueError if the top level is not an
#     object.
#
# parse_color(value: Any, default: Tuple[int, int, int]) -> Tuple[int, int, int]:
#   - Outputs: An RGB triple with channels in [0, 255], or default when
#     value is missing or malformed.

DEFAULT_LOG_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'
DEFAULT_LOG_FILE = 'logs/drifting_dots.log'


def setup_logging(config: Dict[str, Any]) -> None:
    """
    Configures the logging system from a configuration dictionary.

    Logs go to the console and to a file that rotates at 1MB, keeping
    5 backups.
    """
    log_config = config.get('logging', {})
    log_level = log_config.get('level', 'INFO').upper()
    log_format = log_config.get('format', DEFAULT_LOG_FORMAT)
    log_file_path = log_config.get('log_file', DEFAULT_LOG_FILE)

    log_dir = os.path.dirname(log_file_path)
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)

    logger = logging.getLogger()
    logger.setLevel(log_level)

    # Clear existing handlers to avoid duplicate lines on re-initialization
    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = logging.Formatter(log_format)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    file_handler = logging.handlers.RotatingFileHandler(
        log_file_path, maxBytes=1024*1024, backupCount=5
    )
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    logging.info("Logging system initialized.")
    logging.debug(f"Log level set to {log_level}, writing to {log_file_path}.")


def load_config(path: str) -> Dict[str, Any]:
    """Loads a JSON configuration file."""
    logging.info(f"Loading configuration from {path}...")
    try:
        with open(path, 'r', encoding='utf-8') as f:
            config = json.load(f)
    except FileNotFoundError:
        logging.error(f"Configuration file not found at {path}.")
        raise
    except json.JSONDecodeError:
        logging.error(f"Error decoding JSON from {path}.")
        raise

    if not isinstance(config, dict):
        msg = f"Configuration in {path} must be a JSON object, got {type(config).__name__}."
        logging.error(msg)
        raise ValueError(msg)
    logging.info("Configuration loaded successfully.")
    return config


def parse_color(value: Optional[Any], default: Tuple[int, int, int]) -> Tuple[int, int, int]:
    """Reads an [r, g, b] list from config, falling back to default."""
    if value is None:
        return default
    try:
        r, g, b = (int(channel) for channel in value)
    except (ValueError, TypeError) as e:
        logging.warning(f"Could not parse color {value!r} from config: {e}. Using {default}.")
        return default
    if not all(0 <= channel <= 255 for channel in (r, g, b)):
        logging.warning(f"Color {value!r} has channels outside [0, 255]. Using {default}.")
        return default
    return (r, g, b)
