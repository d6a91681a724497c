"""
Exceptions raised while reading or validating an election.
"""
from typing import Optional


class FormatError(ValueError):
    """Raised for malformed BLT (or converter CSV) input.

    :param message: What was wrong with the input.
    :type message: str
    :param token_index: 1-based position of the offending token in the token stream, if known.
    :type token_index: Optional[int]
    :param line: 1-based line number of the offending token, if known.
    :type line: Optional[int]
    """

    def __init__(self, message: str, token_index: Optional[int] = None, line: Optional[int] = None) -> None:
        self.message = message
        self.token_index = token_index
        self.line = line

        location = []
        if token_index is not None:
            location.append(f"token {token_index}")
        if line is not None:
            location.append(f"line {line}")

        if location:
            super().__init__(f"{message} ({', '.join(location)})")
        else:
            super().__init__(message)


class ConfigurationError(ValueError):
    """Raised when seat and candidate counts cannot describe a valid election."""
