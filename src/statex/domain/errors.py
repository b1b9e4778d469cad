"""Shared domain error messages and error types."""

from typing import Any, Optional


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class DefinitionError(DomainError):
    """An extractor definition is inconsistent (a configuration defect)."""


class UnrecognizedDocumentError(DomainError):
    """No registered document type identifies the document."""

    def __init__(self, source: Optional[str] = None):
        self.source = source
        super().__init__(unrecognized_document(source))


class MissingContextError(DomainError):
    """A rule asked for a document context value that was never set."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"Document context '{key}' is not set")


class SectionNotMatchedError(DomainError):
    """A mandatory section did not match the line at its position."""

    def __init__(self, section: str, line_number: int, line: Optional[str]):
        self.section = section
        self.line_number = line_number
        self.line = line
        if line is None:
            message = f"Section '{section}' did not match: document ends before line {line_number}"
        else:
            message = f"Section '{section}' did not match line {line_number}: '{line}'"
        super().__init__(message)


class MalformedNumberError(ValidationError):
    """A captured token is not a number in the statement's locale."""

    def __init__(self, token: str):
        self.token = token
        super().__init__(f"Could not parse number '{token}'")


class MalformedDateError(ValidationError):
    """A captured token is not a valid date or time."""

    def __init__(self, token: str, reason: Optional[str] = None):
        self.token = token
        message = f"Could not parse date '{token}'"
        super().__init__(f"{message}: {reason}" if reason else message)


class BuilderError(DomainError):
    """A builder rejected the captured fields.

    subject optionally carries the partially built transaction so the
    resulting item can show what was read before the failure.
    """

    def __init__(self, message: str, subject: Any = None):
        self.subject = subject
        super().__init__(message)


def unrecognized_document(source: Optional[str]) -> str:
    """Return message for a document no extractor supports."""
    if source:
        return f"Unsupported statement format: {source}"
    return "Unsupported statement format"


def invalid_security_identifier(name: str) -> str:
    """Return message for an instrument identifier of unexpected length."""
    return f"Invalid security identifier (CUSIP/WKN) for '{name}'"


def duplicate_field(field_name: str) -> str:
    """Return message for a field declared by more than one section."""
    return f"Field '{field_name}' is declared more than once"
