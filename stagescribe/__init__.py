"""Commit message generator for staged git changes."""

from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("stagescribe")
except PackageNotFoundError:
    # Fallback for development mode
    __version__ = "0.0.0-dev"
