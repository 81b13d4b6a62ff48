"""
Error taxonomy for the RDF codecs.
"""
from typing import Optional


class RDFCodecError(Exception):
    """Base class for every error raised by jsonld_rdf."""
    pass


class InvalidInputError(RDFCodecError):
    """A text parser was handed something other than a string."""

    def __init__(self, message: str, value: object = None):
        super().__init__(message)
        self.value = value


class ParseError(RDFCodecError):
    """
    Grammar violation in Turtle or N-Quads input.

    Attributes:
        message: Name of the production that failed, e.g.
            "missing expected subject"
        line: 1-based line number
        column: 1-based column, None when only the line is known
    """

    def __init__(self, message: str, line: int, column: Optional[int] = None):
        self.message = message
        self.line = line
        self.column = column
        if column is None:
            super().__init__(f"{message} (line {line})")
        else:
            super().__init__(f"{message} (line {line}, column {column})")


class UnknownFormatError(RDFCodecError):
    """No parser or serializer is registered for a media type."""

    def __init__(self, format: str):
        super().__init__(f"Unknown RDF format: {format}")
        self.format = format


class MalformedLiteralError(RDFCodecError, ValueError):
    """A literal carries both a language tag and a non-default datatype."""
    pass


class ConfigValidationError(RDFCodecError):
    """Configuration validation error."""
    pass
