"""
Context Extraction Utilities

This module builds the RequestContext of an adapter request from the raw body,
the query parameters and the FIWARE headers.

Sources:
1. Query parameters ``id`` and ``type`` (entity identity, optional)
2. Headers ``txId``, ``Fiware-Service``, ``Fiware-ServicePath``
3. Generated transaction id when the ``txId`` header is missing
"""

import uuid
import logging
from fastapi import Request
from typing import Optional
from models.request_context import RequestContext

logger = logging.getLogger(__name__)

TX_ID_HEADER = "txId"
SERVICE_HEADER = "Fiware-Service"
SERVICE_PATH_HEADER = "Fiware-ServicePath"


def get_request_context(request: Request, body: str) -> RequestContext:
    """
    Extract context from an adapter request.

    Args:
        request: FastAPI Request object containing headers and query parameters
        body: Request body decoded as text

    Returns:
        RequestContext with the body and all available metadata
    """
    tx_id = _extract_tx_id(request)

    context = RequestContext(
        body=body,
        tx_id=tx_id,
        entity_id=_non_empty(request.query_params.get("id")),
        entity_type=_non_empty(request.query_params.get("type")),
        service=_non_empty(request.headers.get(SERVICE_HEADER)),
        service_path=_non_empty(request.headers.get(SERVICE_PATH_HEADER)),
    )

    logger.info(
        f"Context extracted: tx_id={tx_id}, "
        f"entity_id={context.entity_id or 'None'}, "
        f"entity_type={context.entity_type or 'None'}, "
        f"service={context.service or 'None'}, "
        f"body_length={len(body)}"
    )

    return context


def _extract_tx_id(request: Request) -> str:
    """
    Extract the transaction id from the txId header, or generate a UUID v4.

    Args:
        request: FastAPI Request object

    Returns:
        Transaction identifier string
    """
    tx_id = _non_empty(request.headers.get(TX_ID_HEADER))

    if tx_id:
        logger.debug(f"Transaction ID from header: {tx_id}")
        return tx_id

    return str(uuid.uuid4())


def _non_empty(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None
