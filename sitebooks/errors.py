"""Mini README: Typed error hierarchy shared by the sitebooks core.

Structure:
    * SitebooksError - base class for every error raised by the package.
    * ValidationError - rejected input (blank names, bad amounts, bad fields).
    * NotFoundError - an operation targeted an identifier that does not exist,
      specialised as NodeNotFoundError, EntryNotFoundError and
      RecordNotFoundError.

The classes also derive from the matching builtin (``ValueError`` or
``KeyError``) so callers written against the builtin types keep working. The
web interface translates them into 400 and 404 responses.
"""

from __future__ import annotations


class SitebooksError(Exception):
    """Base class for all sitebooks errors."""


class ValidationError(SitebooksError, ValueError):
    """Raised when input is rejected at the core boundary."""


class NotFoundError(SitebooksError, KeyError):
    """Raised when an identifier does not resolve."""

    kind = "Item"

    def __init__(self, identifier: object) -> None:
        self.identifier = identifier
        super().__init__(f"{self.kind} {identifier} not found")

    def __str__(self) -> str:
        # KeyError would otherwise render the repr of the message.
        return str(self.args[0])


class NodeNotFoundError(NotFoundError):
    kind = "Node"


class EntryNotFoundError(NotFoundError):
    kind = "Entry"


class RecordNotFoundError(NotFoundError):
    kind = "Record"


def require_name(value: object, *, label: str = "name") -> str:
    """Trim a display name and reject blank values."""

    if value is None:
        raise ValidationError(f"The {label} is required.")
    trimmed = str(value).strip()
    if not trimmed:
        raise ValidationError(f"The {label} cannot be empty.")
    return trimmed
