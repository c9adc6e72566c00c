"""Version control interface."""

from pathlib import Path
from typing import Protocol


class VersionControl(Protocol):
    """Interface for recording journal changes in a repository."""

    def commit_and_push(self, path: Path, message: str) -> bool:
        """Commit a file and push. Returns False if any step failed."""
        ...
