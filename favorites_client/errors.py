"""Exceptions raised by the favorites API client."""

from __future__ import annotations


class NetworkError(Exception):
    """The favorites API could not be reached or did not answer successfully."""


class ApiResponseError(NetworkError):
    """The API answered with a non-success status code."""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(f"HTTP error! status: {status_code} ({message})")
        self.status_code = status_code
        self.message = message
