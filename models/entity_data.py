"""
Parsed Entity Data Models

Intermediate values produced by ``parse_request`` and consumed by
``get_context_attrs``. They only live for the duration of one request.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional
from pydantic import BaseModel, ConfigDict, Field


# Attribute name -> attribute value, as sent to the Context Broker
AttributeSet = Dict[str, Any]


class DataPointFields(BaseModel):
    """
    Value fields of a Monasca Persister data point.

    Attributes:
        value: Metric value
        value_meta: Metric value metadata, dumped as a JSON string
    """
    value: Any = Field(
        ...,
        description="metric.value"
    )
    value_meta: Optional[str] = Field(
        None,
        description="metric.value_meta dumped as string"
    )


class MetricDataPoint(BaseModel):
    """
    A Monasca Persister data point.

    The wire format carries ``_region`` and ``_tenant_id`` inside ``tags``; once
    parsed, ``tags`` only holds metric dimensions and the region is kept apart.
    """
    measurement: str = Field(
        ...,
        description="metric.name"
    )
    time: Optional[str] = Field(
        None,
        description="metric.timestamp in %Y-%m-%dT%H:%M:%S.%fZ format"
    )
    value_fields: DataPointFields = Field(
        ...,
        alias="fields"
    )
    tags: Dict[str, str] = Field(
        default_factory=dict,
        description="metric.dimensions"
    )
    region: Optional[str] = Field(
        None,
        description="metric.meta.region (the _region tag)"
    )

    model_config = ConfigDict(populate_by_name=True)


@dataclass
class ParsedEntityData:
    """
    Result of ``parse_request``.

    Attributes:
        data: Parsed payload (a MetricDataPoint or a single line of plugin output)
        entity_type: Entity type derived from the payload, if the format allows it
        entity_id: Entity id derived from the payload, if the format allows it
    """
    data: Any
    entity_type: Optional[str] = None
    entity_id: Optional[str] = None
