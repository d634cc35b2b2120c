"""Exceptions raised while decoding a codice fiscale.

Every error carries enough context (offending code, component, expected/got
pair) for the caller to report what went wrong.
"""

from __future__ import annotations


class CodiceFiscaleError(ValueError):
    """Base class for all decoding errors."""


class ShapeError(CodiceFiscaleError):
    """Raised when the code does not match the 16-character grammar."""

    def __init__(self, code: str, message: str | None = None, *, normalized: str | None = None) -> None:
        super().__init__(message or f"Invalid codice fiscale: {code!r}")
        self.code = code
        self.normalized = code if normalized is None else normalized


class FormatError(CodiceFiscaleError):
    """Raised when the year or day component cannot be converted."""

    def __init__(self, component: str, value: str) -> None:
        super().__init__(f"Can't convert {component!r} component: {value!r}")
        self.component = component
        self.value = value


class PlaceUnknownError(CodiceFiscaleError):
    """Raised when the place code is neither a comune nor a foreign state."""

    def __init__(self, code: str) -> None:
        super().__init__(f"Birth place code not found: {code!r}")
        self.code = code


class LengthError(CodiceFiscaleError):
    """Raised when the checksum is requested on a code of the wrong length."""

    def __init__(self, code: str) -> None:
        super().__init__(f"The code length must be 15 or 16, got {len(code)}")
        self.code = code


class ChecksumError(CodiceFiscaleError):
    """Raised when the control character does not match the computed one."""

    def __init__(self, expected: str, got: str) -> None:
        super().__init__(f"Wrong CIN (computed: {expected!r}, found: {got!r})")
        self.expected = expected
        self.got = got


class PlaceTablesError(CodiceFiscaleError):
    """Raised when the reference tables are inconsistent."""
