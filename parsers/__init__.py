"""
Parser package.

Each parser turns the raw body of one kind of monitoring payload into NGSI
context attributes. Parsers are looked up by name, which is the path segment
of the adapter endpoint (``POST /{parser_name}``).
"""
from typing import Dict, List, Protocol

from models.entity_data import AttributeSet, ParsedEntityData
from models.request_context import RequestContext
from parsers.errors import (
    MalformedPayload,
    ParserError,
    UnknownParser,
    UnmappableEntity,
)
from parsers import check_http, monasca_persister_data_point


class EntityParser(Protocol):
    """Capability implemented by every payload parser."""

    name: str

    def parse_request(self, context: RequestContext) -> ParsedEntityData:
        ...

    def get_context_attrs(self, entity_data: ParsedEntityData) -> AttributeSet:
        ...


PARSERS: Dict[str, EntityParser] = {
    check_http.parser.name: check_http.parser,
    monasca_persister_data_point.parser.name: monasca_persister_data_point.parser,
}


def get_parser(name: str) -> EntityParser:
    """
    Return the parser registered under ``name``.

    Raises:
        UnknownParser: If no parser has that name
    """
    try:
        return PARSERS[name]
    except KeyError:
        raise UnknownParser(name) from None


def available_parsers() -> List[str]:
    return sorted(PARSERS)


__all__ = [
    "EntityParser",
    "PARSERS",
    "get_parser",
    "available_parsers",
    "ParserError",
    "MalformedPayload",
    "UnmappableEntity",
    "UnknownParser",
]
