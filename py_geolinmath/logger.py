"""Logger of the py_geolinmath library.

All messages go through the `py_geolin` logger. What the library reports:

    * DEBUG: scalar type and square-root provider registrations, the config file found by
      `basicConfig`, rejected `try_parse` input and rejected complex operator splits.
    * WARNING: `geolin.toml` without the expected sections and invalid `PreferredFormat`
      values, which are skipped rather than raised.

Arithmetic, formatting and parsing never log on success. The console handler is installed
at import with the INFO level; DEBUG output, on the console or in a file, needs
`logger.setLevel(logging.DEBUG)`.

Global Variables:
    - logger: The `py_geolin` logger.
    - file_handler: Active file handler, None while file logging is off.

Functions:
    enable_file_logging: Add a DEBUG file handler, replacing a previous one.
    disable_file_logging: Remove and close the file handler.

Examples:
    ```python
    import logging
    from py_geolinmath import Vector2
    from py_geolinmath.logger import logger, enable_file_logging, disable_file_logging

    logger.setLevel(logging.DEBUG)
    enable_file_logging("geolin_parse.log")
    Vector2.try_parse("(1; 2)")  # logs why the text was rejected
    disable_file_logging()
    ```
"""
import logging
from typing import Optional

__all__ = ('logger',
           'enable_file_logging',
           'disable_file_logging',
)

formatter = logging.Formatter("%(levelname)s:%(name)s:%(message)s")
console_handler = logging.StreamHandler()
console_handler.setFormatter(formatter)
console_handler.setLevel(logging.DEBUG)  # Lowest level for console

logger: logging.Logger = logging.getLogger('py_geolin')
logger.addHandler(console_handler)
logger.setLevel(logging.INFO)

# File handler (optional, added dynamically)
file_handler: Optional[logging.FileHandler] = None


def enable_file_logging(filename: str = "debug.log") -> None:
    """Enable logging to a file with DEBUG level output.

    Replaces any existing file handler. The file is opened in append mode.

    Args:
        filename: Name of the log file to create. Defaults to "debug.log".
    """
    global file_handler
    if file_handler is not None:
        disable_file_logging()

    file_handler = logging.FileHandler(filename)
    file_handler.setLevel(logging.DEBUG)  # Log everything to the file
    file_formatter = logging.Formatter("%(asctime)s:%(levelname)s:%(message)s")
    file_handler.setFormatter(file_formatter)
    logger.addHandler(file_handler)


def disable_file_logging() -> None:
    """Disable file logging and close the file handle.

    Safe to call when file logging is not enabled.
    """
    global file_handler
    if file_handler is not None:
        logger.removeHandler(file_handler)
        file_handler.close()
        file_handler = None
