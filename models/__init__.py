"""Data models for the NGSI adapter service."""
from .request_context import RequestContext
from .entity_data import (
    AttributeSet,
    DataPointFields,
    MetricDataPoint,
    ParsedEntityData,
)
from .ngsi import (
    AdapterResponse,
    ContextAttribute,
    ContextElement,
    UpdateContextRequest,
)

__all__ = [
    # Request context
    "RequestContext",
    # Parser data
    "AttributeSet",
    "DataPointFields",
    "MetricDataPoint",
    "ParsedEntityData",
    # NGSI models
    "AdapterResponse",
    "ContextAttribute",
    "ContextElement",
    "UpdateContextRequest",
]
