"""Runtime paths for Enhancer Genie."""

from pathlib import Path


def get_logs_dir() -> Path:
    """Directory for the file log handler, next to the package."""
    return Path(__file__).resolve().parent.parent.parent / "logs"
