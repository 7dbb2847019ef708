"""
Adapter router for monitoring payload ingestion.

This router provides the POST /{parser_name} endpoint. The raw body is parsed
by the named parser, mapped to NGSI context attributes and forwarded to the
Context Broker as an updateContext request.
"""

import logging
from typing import NoReturn
from fastapi import APIRouter, HTTPException, Request

from models.ngsi import AdapterResponse, UpdateContextRequest
from models.request_context import RequestContext
from parsers import get_parser
from parsers.errors import MalformedPayload, ParserError, UnknownParser, UnmappableEntity
from services.context_broker_client import ContextBrokerClient, ContextBrokerError
from utils.context_utils import get_request_context

logger = logging.getLogger(__name__)

router = APIRouter(tags=["adapter"])

ERROR_STATUS = {
    UnknownParser: 404,
    MalformedPayload: 400,
    UnmappableEntity: 422,
}


def _reject(context: RequestContext, error: ParserError) -> NoReturn:
    status_code = ERROR_STATUS.get(type(error), 400)
    logger.warning(
        f"Request rejected: tx_id={context.tx_id}, code={error.code}, "
        f"status={status_code}, error={error.message}"
    )
    raise HTTPException(
        status_code=status_code,
        detail={"code": error.code, "message": error.message}
    )


@router.post("/{parser_name}", response_model=AdapterResponse)
async def adapt_request(parser_name: str, request: Request):
    """
    Parse a monitoring payload and publish it as an NGSI context update.

    Entity identity derived by the parser takes precedence over the ``id`` and
    ``type`` query parameters.

    Args:
        parser_name: Name of the parser for the payload
        request: FastAPI Request object (raw body, query parameters, headers)

    Returns:
        AdapterResponse with the resolved entity and its attributes

    Raises:
        HTTPException: 404 unknown parser, 400 malformed payload or missing
            entity identity, 422 payload not mappable to an entity
    """
    raw_body = await request.body()
    context = get_request_context(request, raw_body.decode("utf-8", errors="replace"))

    try:
        parser = get_parser(parser_name)
        entity_data = parser.parse_request(context)
        attrs = parser.get_context_attrs(entity_data)
    except ParserError as e:
        _reject(context, e)

    entity_id = entity_data.entity_id or context.entity_id
    entity_type = entity_data.entity_type or context.entity_type

    if not entity_id or not entity_type:
        logger.warning(
            f"Missing entity identity: tx_id={context.tx_id}, parser={parser_name}, "
            f"entity_id={entity_id}, entity_type={entity_type}"
        )
        raise HTTPException(
            status_code=400,
            detail={
                "code": "MISSING_ENTITY",
                "message": "Entity id and type are required (query parameters 'id' and 'type')"
            }
        )

    logger.info(
        f"Payload adapted: tx_id={context.tx_id}, parser={parser_name}, "
        f"entity_type={entity_type}, entity_id={entity_id}, "
        f"attributes={sorted(attrs)}"
    )

    update = UpdateContextRequest.for_entity(entity_type, entity_id, attrs)

    published = False
    try:
        broker = ContextBrokerClient()
        result = await broker.update_context(update, context)
        published = result is not None
    except ContextBrokerError as e:
        # Publishing failure does not reject an already valid payload
        logger.error(
            f"Context update failed (non-critical): tx_id={context.tx_id}, "
            f"status={e.status_code}, error={e.message}"
        )

    return AdapterResponse(
        tx_id=context.tx_id,
        entity_id=entity_id,
        entity_type=entity_type,
        attributes=attrs,
        published=published
    )
