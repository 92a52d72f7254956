"""Data layer: models and the option catalog."""

from .models import (
    AlgorithmOption,
    TissueOption,
    AssemblyOption,
    SelectionState,
    HistoryEntry,
    UploadRequest,
    CheckRequest,
    UploadResult,
    CheckResult,
)
from .catalog import OptionCatalog

__all__ = [
    "AlgorithmOption",
    "TissueOption",
    "AssemblyOption",
    "SelectionState",
    "HistoryEntry",
    "UploadRequest",
    "CheckRequest",
    "UploadResult",
    "CheckResult",
    "OptionCatalog",
]
