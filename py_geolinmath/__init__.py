"""Generic 2D/3D vectors and complex numbers over any numeric scalar type."""

import importlib.metadata

__version__ = importlib.metadata.version("py-geolinmath")

# Standard library imports
import importlib.resources
import os
import sys

# Third-party imports
from typing_extensions import Dict, Optional

# Local imports
from .logger import logger as log
from .globalization import PreferredFormat

if sys.version_info[:2] < (3, 11):
    import tomli as tomllib
else:
    import tomllib


def _load_config(filepath: Optional[str] = None, suppress_warnings: bool = False) -> None:
    """Load configuration from a .geolin.toml file.

    Args:
        filepath: Path to configuration file. If None, searches for .geolin.toml or geolin.toml
        suppress_warnings: If True, suppress warning messages
    """
    def find_geolin_toml(start_dir: Optional[str] = None) -> Optional[str]:
        """Search for the geolin.toml file starting from the specified directory.

        Args:
            start_dir: The directory to start searching from. Default is the current working directory.

        Returns:
            The absolute path to the geolin.toml file if found, otherwise None.
        """
        current_dir = os.path.abspath(start_dir or os.getcwd())
        while True:
            for config_path in (os.path.join(current_dir, '.geolin.toml'),
                                os.path.join(current_dir, 'geolin.toml')):
                if os.path.exists(config_path):
                    return os.path.abspath(config_path)

            parent_dir = os.path.dirname(current_dir)
            # reached the root directory
            if parent_dir == current_dir:
                return None
            current_dir = parent_dir

    if filepath is None:
        if (filepath := find_geolin_toml()) is None:
            filepath = find_geolin_toml(os.path.dirname(__file__))

    if filepath is not None:
        log.debug(f"Found {os.path.basename(filepath)} at {os.path.dirname(filepath)}")

        with open(filepath, "rb") as fp:
            _config = tomllib.load(fp)

            if _geolin := _config.get('geolin'):
                if preferred_format := _geolin.get('preferred_format'):
                    PreferredFormat.set(**preferred_format)
                else:
                    if not suppress_warnings:
                        log.warning("Config has no `geolin.preferred_format` section")
            else:
                if not suppress_warnings:
                    log.warning("Config has no `geolin` section")

    log.debug("PreferredFormat load success")


def _basic_config(filename: Optional[str] = None,
                  preferred_format: Optional[Dict[str, str]] = None,
                  suppress_warnings: bool = False) -> None:
    """Load preferred format from file or Mapping.

    Args:
        filename: Configuration file path
        preferred_format: Dictionary of preferred delimiters
        suppress_warnings: If True, suppress warning messages

    Raises:
        ValueError: If both filename and preferred_format are provided
    """
    if filename and preferred_format:
        raise ValueError("Can't use preferred_format and config file at same time")
    if not filename and preferred_format:
        PreferredFormat.set(**preferred_format)
    else:
        # trying to load definitions from geolin.toml
        _load_config(filename, suppress_warnings)


def _resolve_resource_path(path: str) -> str:
    """Resolve a resource path relative to the package."""
    return str(importlib.resources.files('py_geolinmath').joinpath(path))


def _load_default_format() -> None:
    """Load the default ``(x, y)`` / ``a + bi`` format."""
    _basic_config(_resolve_resource_path('assets/.geolin-default.toml'), suppress_warnings=True)


def _load_bracket_format() -> None:
    """Load the ``[x; y]`` vector format."""
    _basic_config(_resolve_resource_path('assets/.geolin-bracket.toml'), suppress_warnings=True)


def _load_engineering_format() -> None:
    """Load the ``<x, y>`` vector format and ``j`` imaginary unit."""
    _basic_config(_resolve_resource_path('assets/.geolin-engineering.toml'), suppress_warnings=True)


loadDefaultFormat = _load_default_format
loadBracketFormat = _load_bracket_format
loadEngineeringFormat = _load_engineering_format

basicConfig = _basic_config

basicConfig()


from .complex_number import ComplexNumber
from .exceptions import (ScalarTypeError, NotRealError, InvalidArgumentError, ComponentCountError,
                         QuantityFormatError, ScalarOverflowError, SqrtNotImplementedError)
from .globalization import (FormatProvider, NumberFormat, Culture, CompositeFormatInfo, VectorFormatInfo,
                            ComplexNumberFormatInfo, FormatBuffer, resolve_format_info)
from .logger import logger, enable_file_logging, disable_file_logging
from .mathutil import (sqrt_unchecked, sqrt_checked, register_sqrt, unregister_sqrt,
                       float_sqrt, integer_sqrt, decimal_sqrt, install_default_sqrt)
from .quantity import Quantity, MultiplicativeInverse
from .scalar import (ScalarOps, ExactOps, FixedWidthIntOps, FloatOps, DecimalOps, Arithmetic,
                     register_scalar, scalar_ops, is_scalar)
from .vector import Vector, Vector2, Vector3

install_default_sqrt()

# DRY: build __all__ from global symbols
_SKIP_GLOBALS = {
    # Skip Python builtins
    "__name__", "__doc__", "__package__", "__loader__", "__spec__",
    "__file__", "__cached__", "__builtins__", "__path__",
    # Skip imported modules
    "tomllib", "sys", "os", "importlib",
    # Skip submodules bound as package attributes
    "complex_number", "exceptions", "globalization", "mathutil", "quantity", "scalar", "vector",
    # Skip typing helpers
    "Dict", "Optional",
}
# Build __all__ from the module's global namespace
__all__ = [
    name for name in globals()
    if not name.startswith("_") and name not in _SKIP_GLOBALS
]
