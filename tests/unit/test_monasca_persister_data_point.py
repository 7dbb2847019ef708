"""
Unit Tests for the Monasca Persister Data Point Parser

Tests entity inference, tag stripping, attribute mapping and malformed input
handling of MonascaPersisterDataPointParser.
"""

import json
import uuid
import pytest

from models.entity_data import MetricDataPoint, ParsedEntityData
from models.request_context import RequestContext
from parsers.errors import MalformedPayload, UnmappableEntity
from parsers.monasca_persister_data_point import (
    METRICS_MAPPING_NGSI,
    MonascaPersisterDataPointParser,
)


def make_context(body) -> RequestContext:
    """Build a request context around a body (dicts are dumped as JSON)."""
    if not isinstance(body, str):
        body = json.dumps(body)
    return RequestContext(body=body, tx_id=str(uuid.uuid4()))


@pytest.fixture
def parser():
    return MonascaPersisterDataPointParser()


class TestParseRequest:
    """Tests for MonascaPersisterDataPointParser.parse_request."""

    def test_region_metric_maps_to_region_entity(self, parser):
        """Example: region.used_ip data point is a region entity."""
        body = (
            '{"measurement":"region.used_ip","time":"2016-01-01T00:00:00.0Z",'
            '"fields":{"value":5,"value_meta":"{}"},'
            '"tags":{"_region":"Spain","_tenant_id":"t1"}}'
        )

        entity_data = parser.parse_request(make_context(body))

        assert entity_data.entity_type == "region"
        assert entity_data.entity_id == "Spain"
        assert isinstance(entity_data.data, MetricDataPoint)
        assert entity_data.data.time == "2016-01-01T00:00:00.0Z"

    def test_component_dimension_maps_to_host_service(self, parser):
        """Example: metric with component dimension is a host_service entity."""
        body = (
            '{"measurement":"cpu.load","fields":{"value":0.5},'
            '"tags":{"_region":"Spain","component":"nova-api"}}'
        )

        entity_data = parser.parse_request(make_context(body))

        assert entity_data.entity_type == "host_service"
        assert entity_data.entity_id == "Spain:controller:nova-api"

    def test_region_prefix_wins_over_component(self, parser):
        """Region metrics stay region entities even with a component dimension."""
        entity_data = parser.parse_request(make_context({
            "measurement": "region.pool_ip",
            "fields": {"value": 10},
            "tags": {"_region": "Trento", "component": "nova-api"},
        }))

        assert entity_data.entity_type == "region"
        assert entity_data.entity_id == "Trento"

    def test_region_and_tenant_tags_are_stripped(self, parser):
        entity_data = parser.parse_request(make_context({
            "measurement": "cpu.load",
            "fields": {"value": 1},
            "tags": {"_region": "Spain", "_tenant_id": "t1", "component": "glance", "host": "h1"},
        }))

        assert entity_data.data.tags == {"component": "glance", "host": "h1"}
        assert entity_data.data.region == "Spain"

    def test_unmappable_metric_raises(self, parser):
        with pytest.raises(UnmappableEntity) as exc_info:
            parser.parse_request(make_context({
                "measurement": "cpu.load",
                "fields": {"value": 1},
                "tags": {"_region": "Spain", "hostname": "compute-1"},
            }))

        assert exc_info.value.code == "UNMAPPABLE_ENTITY"

    def test_missing_region_raises_unmappable(self, parser):
        with pytest.raises(UnmappableEntity):
            parser.parse_request(make_context({
                "measurement": "region.used_ip",
                "fields": {"value": 1},
                "tags": {"_tenant_id": "t1"},
            }))

    @pytest.mark.parametrize("body", [
        "",
        "not json",
        '{"measurement": "region.used_ip",',
        "[1, 2, 3]",
        '"just a string"',
    ])
    def test_invalid_json_raises_malformed(self, parser, body):
        with pytest.raises(MalformedPayload) as exc_info:
            parser.parse_request(make_context(body))

        assert exc_info.value.code == "MALFORMED_PAYLOAD"

    @pytest.mark.parametrize("payload", [
        {"fields": {"value": 1}, "tags": {"_region": "Spain"}},
        {"measurement": "region.used_ip", "tags": {"_region": "Spain"}},
        {"measurement": "region.used_ip", "fields": {}, "tags": {"_region": "Spain"}},
        {"measurement": "region.used_ip", "fields": {"value": 1}, "tags": ["Spain"]},
    ])
    def test_wrong_shape_raises_malformed(self, parser, payload):
        with pytest.raises(MalformedPayload):
            parser.parse_request(make_context(payload))

    def test_parse_does_not_modify_context(self, parser):
        context = make_context({
            "measurement": "cpu.load",
            "fields": {"value": 1},
            "tags": {"_region": "Spain", "component": "nova-api"},
        })

        parser.parse_request(context)

        assert context.entity_id is None
        assert context.entity_type is None


class TestGetContextAttrs:
    """Tests for MonascaPersisterDataPointParser.get_context_attrs."""

    def test_region_example_maps_used_ip(self, parser):
        """Example: region.used_ip with empty metadata yields ipUsed only."""
        entity_data = parser.parse_request(make_context({
            "measurement": "region.used_ip",
            "time": "2016-01-01T00:00:00.0Z",
            "fields": {"value": 5, "value_meta": "{}"},
            "tags": {"_region": "Spain", "_tenant_id": "t1"},
        }))

        assert parser.get_context_attrs(entity_data) == {"ipUsed": 5}

    def test_host_service_example_uses_component_name(self, parser):
        """Example: nova-api component yields nova_api attribute."""
        entity_data = parser.parse_request(make_context({
            "measurement": "cpu.load",
            "fields": {"value": 0.5},
            "tags": {"_region": "Spain", "component": "nova-api"},
        }))

        assert parser.get_context_attrs(entity_data) == {"nova_api": 0.5}

    def test_host_service_replaces_every_hyphen(self, parser):
        entity_data = parser.parse_request(make_context({
            "measurement": "process.pid_count",
            "fields": {"value": 2},
            "tags": {"_region": "Spain", "component": "neutron-l3-agent"},
        }))

        assert parser.get_context_attrs(entity_data) == {"neutron_l3_agent": 2}

    def test_region_value_meta_is_merged(self, parser):
        meta = {"ram_used": 1024, "cpu_allocation_ratio": 16.0, "name": "Spain"}
        entity_data = parser.parse_request(make_context({
            "measurement": "region.pool_ip",
            "fields": {"value": 254, "value_meta": json.dumps(meta)},
            "tags": {"_region": "Spain"},
        }))

        attrs = parser.get_context_attrs(entity_data)

        assert attrs == {**meta, "ipTot": 254}

    def test_region_without_value_meta(self, parser):
        entity_data = parser.parse_request(make_context({
            "measurement": "region.allocated_ip",
            "fields": {"value": 7},
            "tags": {"_region": "Spain"},
        }))

        assert parser.get_context_attrs(entity_data) == {"ipAvailable": 7}

    def test_unmapped_region_metric_keeps_its_name(self, parser):
        entity_data = parser.parse_request(make_context({
            "measurement": "region.sanity_status",
            "fields": {"value": "OK", "value_meta": "{}"},
            "tags": {"_region": "Spain"},
        }))

        assert parser.get_context_attrs(entity_data) == {"region.sanity_status": "OK"}

    def test_base_attribute_wins_over_value_meta(self, parser):
        entity_data = parser.parse_request(make_context({
            "measurement": "region.used_ip",
            "fields": {"value": 5, "value_meta": '{"ipUsed": 99}'},
            "tags": {"_region": "Spain"},
        }))

        assert parser.get_context_attrs(entity_data) == {"ipUsed": 5}

    @pytest.mark.parametrize("value_meta", ["{not json", "[1, 2]", "42"])
    def test_malformed_value_meta_raises(self, parser, value_meta):
        entity_data = ParsedEntityData(
            data=MetricDataPoint(
                measurement="region.used_ip",
                fields={"value": 5, "value_meta": value_meta},
                region="Spain",
            ),
            entity_type="region",
            entity_id="Spain",
        )

        with pytest.raises(MalformedPayload):
            parser.get_context_attrs(entity_data)


class TestMetricsMapping:
    """Tests for the static metric name translation table."""

    def test_mapping_contents(self):
        assert dict(METRICS_MAPPING_NGSI) == {
            "region.allocated_ip": "ipAvailable",
            "region.pool_ip": "ipTot",
            "region.used_ip": "ipUsed",
        }

    def test_mapping_is_read_only(self):
        with pytest.raises(TypeError):
            METRICS_MAPPING_NGSI["region.used_ip"] = "other"
