"""Per-document context store."""

from typing import Iterator, Optional

from statex.domain.errors import MissingContextError


class Context:
    """Ordered key/value strings shared by all rules of one document parse.

    Values are stored raw; numbers and dates are coerced where they are used.
    """

    def __init__(self, values: Optional[dict[str, str]] = None):
        self._values: dict[str, str] = {}
        for key, value in (values or {}).items():
            self.put(key, value)

    def put(self, key: str, value: str) -> None:
        """Set key, replacing any earlier value."""
        if not isinstance(value, str):
            raise TypeError(f"Context value for '{key}' must be a string, got {type(value).__name__}")
        self._values[key] = value

    def get(self, key: str) -> str:
        """Return the value for key.

        Raises:
            MissingContextError: If key was never set for this document
        """
        try:
            return self._values[key]
        except KeyError:
            raise MissingContextError(key) from None

    def get_optional(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return self._values.get(key, default)

    def as_dict(self) -> dict[str, str]:
        return dict(self._values)

    def __contains__(self, key: object) -> bool:
        return key in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"Context({self._values!r})"
