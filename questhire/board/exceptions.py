"""
Board-side errors raised by the API client
"""
from typing import Optional


class BoardError(Exception):
    """Base board error"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class LoadError(BoardError):
    """The pipeline could not be fetched"""


class MoveError(BoardError):
    """A status update was rejected or never reached the server"""


class ShortlistError(BoardError):
    """The shortlist could not be created"""
