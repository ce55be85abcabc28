"""
Database Errors

Exception hierarchy for the device database access layer.

Every failure is fatal to the calling operation: nothing is retried and no
partial result is returned. Messages always name the device, ID code or file
path involved so the failure can be diagnosed without a traceback.
"""


class TrellisDatabaseError(Exception):
    """Base exception for all device database errors."""

    pass


class NotFoundError(TrellisDatabaseError, LookupError):
    """A device, ID code or database file does not exist."""

    pass


class DeviceNotFoundError(NotFoundError):
    """No device in the root document matches the requested name or ID code."""

    pass


class SchemaError(TrellisDatabaseError, ValueError):
    """
    A document is malformed.

    Raised when a required field is absent or has the wrong type, when a key
    does not follow its naming convention (e.g. a tap key without the 'C'
    prefix), or when column-indexed keys are out of order.
    """

    pass


class UnsupportedFamilyError(SchemaError):
    """The device family has no known globals schema."""

    pass


class DatabaseIOError(TrellisDatabaseError):
    """A database file exists but could not be read."""

    pass


class DatabaseNotLoadedError(TrellisDatabaseError):
    """An operation was attempted before the root document was loaded."""

    pass
