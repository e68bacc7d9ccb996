"""Custom exceptions for Postdesk services."""

from typing import Optional


class PostDeskError(Exception):
    """Base class for all Postdesk errors."""


class ValidationError(PostDeskError):
    """Raised when an edit model cannot be written back.

    The only case today is a save whose content type id is no longer
    registered. The write is rejected before the record is touched.
    """


class NotFoundError(PostDeskError):
    """Raised when something referenced by id is missing.

    Usually means the edit model and the content type schema have drifted
    apart (a region, field or region item the schema declares is not in the
    model), or a field type used by a schema is not registered.

    Attributes:
        kind: What was looked up ("region", "field", "field_type", ...)
        identifier: The id that could not be resolved
    """

    def __init__(self, kind: str, identifier: str, message: Optional[str] = None):
        """Initialize NotFoundError.

        Args:
            kind: What was looked up
            identifier: The id that could not be resolved
            message: Optional human-readable override
        """
        self.kind = kind
        self.identifier = identifier
        super().__init__(message or f"{kind} not found: {identifier}")


class ParseError(PostDeskError):
    """Raised when a publish date string is not a valid local date-time.

    Attributes:
        value: The rejected input string
    """

    def __init__(self, value: str, message: str = "Invalid publish date"):
        self.value = value
        super().__init__(f"{message}: {value!r}")


class UnknownBlockTypeError(PostDeskError):
    """Raised when a block group's type is not registered.

    The record writer recovers from this locally by dropping the group.

    Attributes:
        block_type: The unregistered block type id
    """

    def __init__(self, block_type: str):
        self.block_type = block_type
        super().__init__(f"Unknown block type: {block_type}")
