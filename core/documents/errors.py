"""Custom exceptions for document extraction and fetching."""


class DocumentError(Exception):
    """A document could not be read, downloaded or converted to text."""

    def __init__(self, message: str, source: str | None = None):
        self.message = message
        self.source = source
        super().__init__(message)
