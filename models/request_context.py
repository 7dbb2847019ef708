"""
Request Context Data Model

This module defines the RequestContext dataclass holding the raw payload of an
adapter request together with the metadata supplied alongside it (query
parameters and FIWARE headers).
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class RequestContext:
    """
    Context information extracted from an incoming adapter request.

    Parsers only read ``body``. Entity identity derived from the payload is
    returned by the parser, never written back here.

    Attributes:
        body: Raw request body as text
        tx_id: Transaction identifier (from txId header or generated)
        entity_id: Entity id given as the ``id`` query parameter, if any
        entity_type: Entity type given as the ``type`` query parameter, if any
        service: Optional FIWARE service (tenant) header
        service_path: Optional FIWARE service path header
    """
    body: str
    tx_id: str
    entity_id: Optional[str] = None
    entity_type: Optional[str] = None
    service: Optional[str] = None
    service_path: Optional[str] = None
