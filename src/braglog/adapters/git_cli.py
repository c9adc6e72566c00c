"""git adapter - subprocess wrapper for committing journal changes."""

import logging
import subprocess
from pathlib import Path

logger = logging.getLogger(__name__)


class GitVersionControl:
    """
    git subprocess adapter.

    Implements VersionControl protocol. Runs git add/commit/push inside the
    journal repository.
    """

    def __init__(self, repository_path: Path | str, timeout: int = 60):
        self.repository_path = Path(repository_path).expanduser()
        self.timeout = timeout

    def _git(self, *args: str) -> subprocess.CompletedProcess:
        return subprocess.run(
            ["git", *args],
            cwd=self.repository_path,
            capture_output=True,
            text=True,
            timeout=self.timeout,
        )

    def commit_and_push(self, path: Path, message: str) -> bool:
        """Stage a path (file or directory), commit and push. False if any step failed."""
        try:
            for args in (("add", "--", str(path)), ("commit", "-m", message), ("push",)):
                result = self._git(*args)
                if result.returncode != 0:
                    logger.warning(f"git {args[0]} failed: {result.stderr.strip()}")
                    return False
        except FileNotFoundError:
            logger.warning("git not found on PATH")
            return False
        except subprocess.TimeoutExpired:
            logger.warning(f"git timed out after {self.timeout}s")
            return False
        return True


class NoOpVersionControl:
    """VersionControl that records nothing, used when repo sync is off."""

    def commit_and_push(self, path: Path, message: str) -> bool:
        return True
