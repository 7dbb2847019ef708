"""
Parser Errors

Exceptions raised by the payload parsers. They are terminal failures of the
current request: parsers never recover locally, the adapter router translates
them into HTTP error responses.
"""


class ParserError(Exception):
    """
    Base class for parser failures.

    Attributes:
        message: Human-readable error description
        code: Machine-readable error code for logging/responses
    """
    def __init__(self, message: str, code: str = "PARSER_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)


class MalformedPayload(ParserError):
    """Raised when the request body cannot be decoded (invalid JSON, wrong shape, empty body)."""
    def __init__(self, message: str):
        super().__init__(message, code="MALFORMED_PAYLOAD")


class UnmappableEntity(ParserError):
    """Raised when a payload cannot be mapped to any NGSI entity type/id."""
    def __init__(self, message: str):
        super().__init__(message, code="UNMAPPABLE_ENTITY")


class UnknownParser(ParserError):
    """Raised when no parser is registered under the requested name."""
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown parser: {name}", code="UNKNOWN_PARSER")
