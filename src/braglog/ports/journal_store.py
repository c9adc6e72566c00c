"""Journal storage interface."""

from typing import Protocol

from braglog.core.entries import BragEntry, DateRange


class NotInitializedError(Exception):
    """Raised when the journal is used before 'brag init'."""

    pass


class InitializationError(Exception):
    """Raised when the journal location cannot be initialized."""

    pass


class JournalStore(Protocol):
    """Interface for persisting and querying brag entries."""

    def save(self, entry: BragEntry) -> bool:
        """Store an entry. Returns False if identical content already exists that year."""
        ...

    def find_by_date_range(self, date_range: DateRange) -> list[BragEntry]:
        """All entries dated within the range, oldest first."""
        ...

    def is_initialized(self) -> bool:
        """Check if the backing location is ready for use."""
        ...

    def initialize(self) -> None:
        """One-time setup of the backing location."""
        ...
