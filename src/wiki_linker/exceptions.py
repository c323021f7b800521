"""
Custom exceptions for wiki_linker.
"""

class WikiLinkerException(Exception):
    """Base exception for the application."""
    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)

class PageNotFoundException(WikiLinkerException):
    """Raised when a title does not resolve to a page id."""
    def __init__(self, title: str):
        self.title = title
        super().__init__(f"Page does not exist: {title}")

class TooManyTitlesError(WikiLinkerException):
    """Raised when a single title lookup asks for more ids than the API accepts."""
    pass

class WikiServiceUnavailableException(WikiLinkerException):
    """Raised when the wiki client is used without an open HTTP session."""
    pass
