"""
Context Broker Client

This service forwards NGSI updateContext requests to the Context Broker. It
reads its configuration from the environment and is disabled (with a warning)
when no broker URL is configured.
"""

import logging
import os
from typing import Optional

import httpx

from models.ngsi import UpdateContextRequest
from models.request_context import RequestContext

logger = logging.getLogger(__name__)

UPDATE_CONTEXT_PATH = "/v1/updateContext"
DEFAULT_TIMEOUT_SECONDS = 10.0


class ContextBrokerError(Exception):
    """
    Raised when the Context Broker rejects an update or cannot be reached.

    Attributes:
        message: Human-readable error description
        status_code: HTTP status returned by the broker, if any
    """
    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


def _timeout_from_env() -> float:
    """Read CONTEXT_BROKER_TIMEOUT, falling back to the default on invalid values."""
    raw = os.getenv("CONTEXT_BROKER_TIMEOUT")
    if raw is None:
        return DEFAULT_TIMEOUT_SECONDS
    try:
        timeout = float(raw)
    except ValueError:
        timeout = -1.0
    if not timeout > 0:
        logger.warning(
            f"Invalid CONTEXT_BROKER_TIMEOUT={raw!r}, using {DEFAULT_TIMEOUT_SECONDS}s"
        )
        return DEFAULT_TIMEOUT_SECONDS
    return timeout


class ContextBrokerClient:
    """
    Service for publishing context updates to the Context Broker.

    Environment Variables:
        CONTEXT_BROKER_URL: Base URL of the broker (publishing disabled if unset)
        CONTEXT_BROKER_TIMEOUT: Request timeout in seconds (default: 10)
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.base_url = (base_url or os.getenv("CONTEXT_BROKER_URL") or "").rstrip("/")
        self.timeout = timeout if timeout is not None else _timeout_from_env()
        self._transport = transport

        if not self.base_url:
            logger.debug("CONTEXT_BROKER_URL not configured, context updates disabled")

    @property
    def enabled(self) -> bool:
        return bool(self.base_url)

    async def update_context(
        self,
        update: UpdateContextRequest,
        context: RequestContext
    ) -> Optional[dict]:
        """
        Send an updateContext request.

        Args:
            update: NGSI update to send
            context: Request context (transaction id and FIWARE headers)

        Returns:
            Broker response body, or None when publishing is disabled

        Raises:
            ContextBrokerError: If the request fails or the broker returns an error status
        """
        if not self.enabled:
            logger.debug(f"Skipping context update (broker disabled): tx_id={context.tx_id}")
            return None

        headers = {"txId": context.tx_id}
        if context.service:
            headers["Fiware-Service"] = context.service
        if context.service_path:
            headers["Fiware-ServicePath"] = context.service_path

        url = f"{self.base_url}{UPDATE_CONTEXT_PATH}"
        payload = update.model_dump(by_alias=True)

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(url, json=payload, headers=headers)
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(
                f"Context Broker rejected update: tx_id={context.tx_id}, "
                f"status={e.response.status_code}"
            )
            raise ContextBrokerError(
                f"Context Broker returned {e.response.status_code}",
                status_code=e.response.status_code
            ) from e
        except httpx.RequestError as e:
            logger.error(
                f"Context Broker request failed: tx_id={context.tx_id}, "
                f"error={type(e).__name__}: {e}"
            )
            raise ContextBrokerError(f"Context Broker unreachable: {e}") from e

        logger.info(
            f"Context update published: tx_id={context.tx_id}, "
            f"status={response.status_code}"
        )

        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError as e:
            logger.error(
                f"Context Broker returned a non-JSON body: tx_id={context.tx_id}, "
                f"status={response.status_code}"
            )
            raise ContextBrokerError(
                "Context Broker response is not valid JSON",
                status_code=response.status_code
            ) from e
