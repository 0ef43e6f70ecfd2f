"""Exception hierarchy for RealtyMVP."""


class RealtyMVPError(Exception):
    """Base exception for all RealtyMVP errors."""


class UnknownEntityKindError(RealtyMVPError):
    """Raised when an entity kind is not one of the managed kinds."""


class EntityNotFoundError(RealtyMVPError):
    """Raised when a record id does not exist for its kind."""


class InvalidQueryError(RealtyMVPError):
    """Raised for unknown sort/filter/update fields or values that cannot be coerced."""


class EntityStoreError(RealtyMVPError):
    """Raised when the database rejects a read or write."""


class UploadError(RealtyMVPError):
    """Raised when a file cannot be stored."""
