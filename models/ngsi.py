"""
NGSI Data Models

Pydantic models for the NGSI v1 ``updateContext`` request sent to the Context
Broker, and for the response returned by the adapter endpoint.
"""

import os
from typing import Any, Dict, List
from pydantic import BaseModel, ConfigDict, Field

from models.entity_data import AttributeSet


class ContextAttribute(BaseModel):
    """A single NGSI context attribute."""
    name: str
    type: str = Field(
        default="string",
        description="NGSI attribute type"
    )
    value: Any


class ContextElement(BaseModel):
    """An NGSI entity together with the attributes to update."""
    type: str
    is_pattern: str = Field(
        default="false",
        alias="isPattern"
    )
    id: str
    attributes: List[ContextAttribute] = Field(default_factory=list)

    model_config = ConfigDict(populate_by_name=True)


class UpdateContextRequest(BaseModel):
    """NGSI v1 updateContext request body."""
    context_elements: List[ContextElement] = Field(
        ...,
        alias="contextElements"
    )
    update_action: str = Field(
        default="APPEND",
        alias="updateAction"
    )

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def for_entity(
        cls,
        entity_type: str,
        entity_id: str,
        attrs: AttributeSet
    ) -> "UpdateContextRequest":
        """
        Build an APPEND update for one entity.

        The attribute type is taken from NGSI_ATTRIBUTE_TYPE (default: string).
        """
        attr_type = os.getenv("NGSI_ATTRIBUTE_TYPE", "string")
        element = ContextElement(
            type=entity_type,
            id=entity_id,
            attributes=[
                ContextAttribute(name=name, type=attr_type, value=value)
                for name, value in attrs.items()
            ]
        )
        return cls(context_elements=[element])


class AdapterResponse(BaseModel):
    """
    Response from the adapter endpoint.

    Attributes:
        tx_id: Transaction identifier of the request
        entity_id: Resolved entity id
        entity_type: Resolved entity type
        attributes: Context attributes derived from the payload
        published: Whether the update reached the Context Broker
    """
    tx_id: str = Field(..., alias="txId")
    entity_id: str = Field(..., alias="entityId")
    entity_type: str = Field(..., alias="entityType")
    attributes: Dict[str, Any] = Field(default_factory=dict)
    published: bool = False

    model_config = ConfigDict(populate_by_name=True)
