"""
Monasca Persister Data Point Parser

Parses data points forwarded by Monasca Persister and maps them to NGSI
entities and context attributes.

A data point is a JSON document like this::

    {
      "measurement": "str",        # metric.name
      "time": "str",               # metric.timestamp (%Y-%m-%dT%H:%M:%S.%fZ)
      "fields": {
        "value": ...,              # metric.value
        "value_meta": "..."        # metric.value_meta dumped as string
      },
      "tags": {
        "<dimension>": "str",      # metric.dimensions
        "_region": "str",          # metric.meta.region
        "_tenant_id": "str"        # metric.meta.tenantId
      }
    }

Entity mapping depends on the metric name and dimensions:

- ``region.*`` metrics describe a region: entity type ``region``, entity id
  is the region name. ``value_meta`` carries further region attributes.
- metrics with a ``component`` dimension describe a controller service:
  entity type ``host_service``, entity id ``<region>:controller:<component>``.
"""

import json
import logging
from types import MappingProxyType
from typing import Any, Dict

from pydantic import ValidationError

from models.entity_data import AttributeSet, MetricDataPoint, ParsedEntityData
from models.request_context import RequestContext
from parsers.errors import MalformedPayload, UnmappableEntity

logger = logging.getLogger(__name__)

# Mapping between Monasca metrics and NGSI attributes
METRICS_MAPPING_NGSI = MappingProxyType({
    "region.allocated_ip": "ipAvailable",
    "region.pool_ip": "ipTot",
    "region.used_ip": "ipUsed",
})

REGION_TAG = "_region"
TENANT_TAG = "_tenant_id"
REGION_METRIC_PREFIX = "region."
COMPONENT_DIMENSION = "component"

ENTITY_TYPE_REGION = "region"
ENTITY_TYPE_HOST_SERVICE = "host_service"


class MonascaPersisterDataPointParser:
    """Parser for Monasca Persister data points."""

    name = "monasca_persister_data_point"

    def parse_request(self, context: RequestContext) -> ParsedEntityData:
        """
        Parse the request body into a data point and derive its entity.

        Args:
            context: Request context holding the raw body

        Returns:
            ParsedEntityData with the data point (dimensions only in ``tags``)
            and the derived entity type and id

        Raises:
            MalformedPayload: If the body is not valid JSON or not a data point
            UnmappableEntity: If no NGSI entity matches the metric name/dimensions
        """
        try:
            raw = json.loads(context.body)
        except (json.JSONDecodeError, TypeError) as e:
            raise MalformedPayload(f"Invalid JSON data point: {e}") from e

        if not isinstance(raw, dict):
            raise MalformedPayload("Data point must be a JSON object")

        # Region and tenant travel as tags, but are not metric dimensions
        tags = raw.get("tags")
        if tags is None:
            tags = {}
        if not isinstance(tags, dict):
            raise MalformedPayload("Data point tags must be a JSON object")
        dimensions = dict(tags)
        region = dimensions.pop(REGION_TAG, None)
        dimensions.pop(TENANT_TAG, None)

        try:
            data_point = MetricDataPoint.model_validate({
                **raw,
                "tags": dimensions,
                "region": region,
            })
        except ValidationError as e:
            raise MalformedPayload(
                f"Invalid data point: {e.error_count()} validation error(s)"
            ) from e

        entity_type, entity_id = self._map_entity(data_point)

        logger.debug(
            f"Data point parsed: tx_id={context.tx_id}, "
            f"measurement={data_point.measurement}, "
            f"entity_type={entity_type}, entity_id={entity_id}"
        )

        return ParsedEntityData(
            data=data_point,
            entity_type=entity_type,
            entity_id=entity_id
        )

    def get_context_attrs(self, entity_data: ParsedEntityData) -> AttributeSet:
        """
        Map a parsed data point to NGSI context attributes.

        The metric value becomes an attribute named after the measurement (or
        after the ``component`` dimension for host services), translated through
        METRICS_MAPPING_NGSI. Region data points also contribute every entry of
        their ``value_meta`` document.

        Raises:
            MalformedPayload: If ``value_meta`` of a region data point is not a JSON object
        """
        data_point: MetricDataPoint = entity_data.data
        attrs: Dict[str, Any] = {}

        attr_name = data_point.measurement
        attr_value = data_point.value_fields.value

        if entity_data.entity_type == ENTITY_TYPE_REGION:
            attrs.update(self._parse_value_meta(data_point.value_fields.value_meta))
        elif entity_data.entity_type == ENTITY_TYPE_HOST_SERVICE:
            attr_name = data_point.tags[COMPONENT_DIMENSION].replace("-", "_")

        attr_name = METRICS_MAPPING_NGSI.get(attr_name, attr_name)
        attrs[attr_name] = attr_value

        return attrs

    @staticmethod
    def _map_entity(data_point: MetricDataPoint) -> tuple[str, str]:
        """Derive (entity_type, entity_id) from metric name and dimensions."""
        if data_point.measurement.startswith(REGION_METRIC_PREFIX):
            entity_type = ENTITY_TYPE_REGION
        elif COMPONENT_DIMENSION in data_point.tags:
            entity_type = ENTITY_TYPE_HOST_SERVICE
        else:
            raise UnmappableEntity(
                "Data point could not be mapped to a NGSI entity "
                f"(unknown metric name or dimensions): measurement={data_point.measurement}"
            )

        if not data_point.region:
            raise UnmappableEntity(
                f"Data point has no region: measurement={data_point.measurement}"
            )

        if entity_type == ENTITY_TYPE_REGION:
            return entity_type, data_point.region

        component = data_point.tags[COMPONENT_DIMENSION]
        return entity_type, f"{data_point.region}:controller:{component}"

    @staticmethod
    def _parse_value_meta(value_meta: str | None) -> Dict[str, Any]:
        # Missing metadata carries no extra attributes
        if not value_meta:
            return {}
        try:
            meta = json.loads(value_meta)
        except json.JSONDecodeError as e:
            raise MalformedPayload(f"Invalid value_meta JSON: {e}") from e
        if not isinstance(meta, dict):
            raise MalformedPayload("value_meta must be a JSON object")
        return meta


parser = MonascaPersisterDataPointParser()
