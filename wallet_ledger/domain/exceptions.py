"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class WalletNotFoundError(DomainException):
    """No wallet with the requested identifier is loaded"""

    pass


class PersistenceError(DomainException):
    """The store could not save or delete a record"""

    pass


class StorageIncompatibleError(DomainException):
    """Stored schema does not match the schema this build expects"""

    pass
