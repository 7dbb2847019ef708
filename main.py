from fastapi import FastAPI
from dotenv import load_dotenv
import os
import logging
from parsers import available_parsers
from routers import adapter

load_dotenv()

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def log_configuration():
    """
    Log the Context Broker integration status.

    If CONTEXT_BROKER_URL is missing, payloads are still parsed and answered
    but no context update is published.
    """
    broker_url = os.getenv("CONTEXT_BROKER_URL")

    if broker_url:
        logger.info("=" * 60)
        logger.info("Context Broker integration ENABLED")
        logger.info(f"  Context Broker URL: {broker_url}")
        logger.info(f"  Timeout: {os.getenv('CONTEXT_BROKER_TIMEOUT', '10')}s")
        logger.info(f"  Parsers: {', '.join(available_parsers())}")
        logger.info("=" * 60)
    else:
        logger.warning("=" * 60)
        logger.warning("Context Broker integration DISABLED")
        logger.warning("Missing CONTEXT_BROKER_URL")
        logger.warning("Payloads will be parsed without publishing context updates")
        logger.warning("=" * 60)


log_configuration()

app = FastAPI(title="NGSI Adapter")


@app.get("/health")
def health():
    return {"status": "ok", "parsers": available_parsers()}


# Include routers (catch-all parser route goes last)
app.include_router(adapter.router)
