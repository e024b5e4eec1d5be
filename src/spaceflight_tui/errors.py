"""Errors raised while fetching articles."""

from __future__ import annotations

from typing import Optional


class FetchError(Exception):
    """Base exception for article fetch failures"""
    pass


class InvalidURLError(FetchError):
    """The request URL could not be built"""
    pass


class NoDataError(FetchError):
    """The server answered with an empty body"""
    pass


class TransportError(FetchError):
    """Network or HTTP failure; ``original`` is the underlying exception"""

    def __init__(self, message: str, original: Optional[BaseException] = None):
        super().__init__(message)
        self.original = original


class DecodingError(FetchError):
    """The response body did not have the expected JSON shape"""
    pass
