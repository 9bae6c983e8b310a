import unittest

from otel_lambda.trigger import (
    EventTypes,
    get_client_context_custom,
    get_first_record,
    parse_event_source,
)

from tests.utils import ClientContext, get_mock_context, load_event

xray_header = (
    "Root=1-5759e988-bd862e3fe1be46a994272793;Parent=53995c3f42cd8ad8;Sampled=1"
)


class TestParseEventSource(unittest.TestCase):
    def test_event_source_api_gateway(self):
        event = load_event("api-gateway")
        event_source = parse_event_source(event, get_mock_context())
        self.assertEqual(event_source.to_string(), "gateway")
        self.assertTrue(event_source.equals(EventTypes.GATEWAY))
        self.assertEqual(event_source.carrier, event["headers"])

    def test_event_source_api_gateway_empty_headers(self):
        event_source = parse_event_source({"headers": {}}, get_mock_context())
        self.assertEqual(event_source.event_type, EventTypes.GATEWAY)
        self.assertEqual(event_source.carrier, {})

    def test_event_source_null_headers(self):
        event_source = parse_event_source({"headers": None}, get_mock_context())
        self.assertEqual(event_source.event_type, EventTypes.UNKNOWN)
        self.assertEqual(event_source.carrier, {})

    def test_event_source_headers_not_a_mapping(self):
        event_source = parse_event_source({"headers": "nope"}, get_mock_context())
        self.assertEqual(event_source.event_type, EventTypes.UNKNOWN)

    def test_event_source_headers_drops_non_string_values(self):
        event = {"headers": {"traceparent": "00-abc", "X-Count": 3, "X-List": ["a"]}}
        event_source = parse_event_source(event, get_mock_context())
        self.assertEqual(event_source.carrier, {"traceparent": "00-abc"})

    def test_event_source_direct_invoke(self):
        custom = {"traceparent": "00-0af7651916cd43dd8448eb211c80319c-b7ad6b7169203331-01"}
        ctx = get_mock_context(client_context=ClientContext(custom=custom))
        event_source = parse_event_source({"foo": "bar"}, ctx)
        self.assertEqual(event_source.to_string(), "direct-invoke")
        self.assertEqual(event_source.carrier, custom)

    def test_event_source_direct_invoke_dict_client_context(self):
        custom = {"traceparent": "00-abc"}
        ctx = get_mock_context(client_context={"Custom": custom})
        event_source = parse_event_source({}, ctx)
        self.assertEqual(event_source.event_type, EventTypes.DIRECT_INVOKE)
        self.assertEqual(event_source.carrier, custom)

    def test_event_source_direct_invoke_overrides_headers(self):
        custom = {"traceparent": "00-custom"}
        ctx = get_mock_context(client_context=ClientContext(custom=custom))
        event = {"headers": {"traceparent": "00-headers"}}
        event_source = parse_event_source(event, ctx)
        self.assertEqual(event_source.event_type, EventTypes.DIRECT_INVOKE)
        self.assertEqual(event_source.carrier, custom)

    def test_event_source_client_context_without_custom(self):
        ctx = get_mock_context(client_context=ClientContext(env={"a": "b"}))
        event = load_event("api-gateway")
        event_source = parse_event_source(event, ctx)
        self.assertEqual(event_source.event_type, EventTypes.GATEWAY)

    def test_event_source_sqs(self):
        event = load_event("sqs")
        event_source = parse_event_source(event, get_mock_context())
        self.assertEqual(event_source.to_string(), "queue")
        self.assertEqual(event_source.carrier, {"x-amzn-trace-id": xray_header})

    def test_event_source_sqs_overrides_headers_and_custom(self):
        event = load_event("sqs")
        event["headers"] = {"traceparent": "00-headers"}
        ctx = get_mock_context(
            client_context=ClientContext(custom={"traceparent": "00-custom"})
        )
        event_source = parse_event_source(event, ctx)
        self.assertEqual(event_source.event_type, EventTypes.QUEUE)
        self.assertEqual(event_source.carrier, {"x-amzn-trace-id": xray_header})

    def test_event_source_sqs_without_trace_header(self):
        event = load_event("sqs-no-trace-header")
        event_source = parse_event_source(event, get_mock_context())
        self.assertEqual(event_source.event_type, EventTypes.UNKNOWN)
        self.assertEqual(event_source.carrier, {})

    def test_event_source_records_without_attributes(self):
        event = {"Records": [{"eventSource": "aws:s3"}]}
        event_source = parse_event_source(event, get_mock_context())
        self.assertEqual(event_source.event_type, EventTypes.UNKNOWN)

    def test_event_source_empty_records(self):
        event_source = parse_event_source({"Records": []}, get_mock_context())
        self.assertEqual(event_source.event_type, EventTypes.UNKNOWN)

    def test_event_source_unknown(self):
        event = load_event("scheduled")
        event_source = parse_event_source(event, get_mock_context())
        self.assertEqual(event_source.to_string(), "unknown")
        self.assertFalse(event_source.equals(EventTypes.UNKNOWN))
        self.assertEqual(event_source.carrier, {})

    def test_event_source_not_a_dict(self):
        for event in (None, "a string", 42, ["a", "list"]):
            event_source = parse_event_source(event, None)
            self.assertEqual(event_source.event_type, EventTypes.UNKNOWN)
            self.assertEqual(event_source.carrier, {})

    def test_event_source_carrier_is_a_copy(self):
        event = load_event("api-gateway")
        event_source = parse_event_source(event, get_mock_context())
        event_source.carrier["injected"] = "value"
        self.assertNotIn("injected", event["headers"])


class TestHelpers(unittest.TestCase):
    def test_get_first_record(self):
        self.assertEqual(get_first_record({"Records": [{"a": 1}, {"b": 2}]}), {"a": 1})
        self.assertIsNone(get_first_record({"Records": []}))
        self.assertIsNone(get_first_record({"Records": "nope"}))
        self.assertIsNone(get_first_record(None))

    def test_get_client_context_custom(self):
        self.assertIsNone(get_client_context_custom(None))
        self.assertIsNone(get_client_context_custom(get_mock_context()))
        self.assertIsNone(get_client_context_custom(get_mock_context(client_context={})))
        custom = {"a": "b"}
        self.assertEqual(
            get_client_context_custom(
                get_mock_context(client_context=ClientContext(custom=custom))
            ),
            custom,
        )
        self.assertEqual(
            get_client_context_custom(get_mock_context(client_context={"custom": custom})),
            custom,
        )
