"""
Utility functions and logging configuration for the PBDB client.
"""

import logging
import sys

LOGGER_NAME = "paleobiodb"


def setup_logging(
    level: int = logging.INFO,
    log_file: str | None = None,
    verbose: bool = False,
) -> logging.Logger:
    """
    Configure logging for the application.

    Args:
        level: Logging level (default: INFO)
        log_file: Optional file path to write logs
        verbose: If True, set level to DEBUG

    Returns:
        Configured logger instance
    """
    if verbose:
        level = logging.DEBUG

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    # Clear existing handlers
    logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)

    formatter = logging.Formatter(
        "%(asctime)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


def get_logger() -> logging.Logger:
    """Get the application logger."""
    return logging.getLogger(LOGGER_NAME)


def parse_param_pairs(pairs: tuple[str, ...] | list[str]) -> dict[str, str | list[str]]:
    """
    Parse ``NAME=VALUE`` strings from the command line into a query mapping.

    A name given more than once collects its values into a list, in order.

    Args:
        pairs: Strings of the form ``name=value``

    Returns:
        Ordered mapping of parameter name to value(s)

    Raises:
        ValueError: If a pair has no ``=`` or an empty name
    """
    params: dict[str, str | list[str]] = {}

    for pair in pairs:
        name, sep, value = pair.partition("=")
        name = name.strip()
        if not sep or not name:
            raise ValueError(f"Expected NAME=VALUE, got '{pair}'")

        if name in params:
            existing = params[name]
            if isinstance(existing, list):
                existing.append(value)
            else:
                params[name] = [existing, value]
        else:
            params[name] = value

    return params


def sanitize_filename(name: str, max_length: int = 200) -> str:
    """
    Sanitize a string for use as a filename.

    Args:
        name: Input string
        max_length: Maximum allowed length

    Returns:
        Safe filename string
    """
    unsafe_chars = '<>:"/\\|?*'
    for char in unsafe_chars:
        name = name.replace(char, "_")

    name = name.strip().strip(".")

    if len(name) > max_length:
        name = name[:max_length]

    return name or "unnamed"


# Longitude/latitude column pairs, in order of preference
COORDINATE_COLUMNS = (("lng", "lat"), ("paleolng", "paleolat"))


def find_coordinate_columns(columns) -> tuple[str, str] | None:
    """
    Find the longitude and latitude columns of a result table.

    Args:
        columns: Column names

    Returns:
        (longitude, latitude) column names, or None if absent
    """
    names = set(columns)
    for lng, lat in COORDINATE_COLUMNS:
        if lng in names and lat in names:
            return lng, lat
    return None
