class LedgerError(Exception):
    """Base class for every error the ledger reports to its caller."""


class InvalidDate(LedgerError, ValueError):
    pass


class InvalidAmount(LedgerError, ValueError):
    pass


class CapacityExceeded(LedgerError):
    pass


class IndexOutOfRange(LedgerError, IndexError):
    pass


class PersistenceUnavailable(LedgerError, OSError):
    """The data file could not be opened for reading or writing."""
