"""Error taxonomy for the food diary."""


class FoodDiaryError(Exception):
    """Base class for food diary errors."""


class ValidationError(FoodDiaryError):
    """Input rejected before it reaches storage."""


class ProviderError(FoodDiaryError):
    """Nutrition provider lookup failed."""


class StorageError(FoodDiaryError):
    """Persistent store read, write or migration failed."""


class CorruptSnapshotError(StorageError):
    """A stored nutrient snapshot could not be decoded."""

    def __init__(self, entry_id: int, reason: str) -> None:
        super().__init__(f"Corrupt snapshot for log entry {entry_id}: {reason}")
        self.entry_id = entry_id


class MigrationError(StorageError):
    """A schema migration could not be applied."""

    def __init__(self, version: int, reason: str) -> None:
        super().__init__(f"Migration to schema version {version} failed: {reason}")
        self.version = version


class NotFoundError(FoodDiaryError):
    """Update or delete target does not exist."""

    def __init__(self, entry_id: int) -> None:
        super().__init__(f"Log entry {entry_id} not found")
        self.entry_id = entry_id
