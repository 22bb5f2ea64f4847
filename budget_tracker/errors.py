"""Exception classes for the budget tracker."""


class BudgetTrackerError(Exception):
    """Base exception for the budget tracker."""
    pass


class ConfigError(BudgetTrackerError):
    """Invalid category group or threshold configuration."""
    pass


class ImportFormatError(BudgetTrackerError):
    """Imported table is missing the Store, Amount or Date header."""
    pass


class ExportFormatError(BudgetTrackerError):
    """Entries cannot be written to the unescaped Store,Amount,Date table."""

    def __init__(self, message, stores=None):
        super().__init__(message)
        self.stores = list(stores or [])


class StorageUnavailableError(BudgetTrackerError):
    """The entry store could not be read or written."""
    pass
