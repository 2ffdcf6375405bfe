# -*- coding: utf-8 -*-
"""The base exception class in visionlink."""


class ConnectorError(Exception):
    """The base class for all the errors raised by the connector."""

    def __init__(self, message: str) -> None:
        """Initialize the exception with a message.

        Args:
            message (`str`):
                The error message.
        """
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        """Return the string representation of the exception."""
        return f"{self.__class__.__name__}: {self.message}"
