"""Enhancer Genie web client."""

from ._version import VERSION

__version__ = VERSION
