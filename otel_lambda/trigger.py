# Unless explicitly stated otherwise all files in this repository are licensed
# under the Apache License Version 2.0.
# This product includes software developed at Datadog (https://www.datadoghq.com/).
# Copyright 2019 Datadog, Inc.

import logging
from collections.abc import Mapping
from enum import Enum
from typing import Any, Dict, Optional

from otel_lambda.constants import TraceHeader

logger = logging.getLogger(__name__)


class _stringTypedEnum(Enum):
    """
    _stringTypedEnum provides a type-hinted convenience function for getting the string value of
    an enum.
    """

    def get_string(self) -> str:
        return self.value


class EventTypes(_stringTypedEnum):
    """
    EventTypes is an enum of the invocation sources trace context is read from.
    """

    UNKNOWN = "unknown"
    GATEWAY = "gateway"
    DIRECT_INVOKE = "direct-invoke"
    QUEUE = "queue"


class _EventSource:
    """
    _EventSource holds an invocation's type and the carrier built for it.
    """

    def __init__(self, event_type: EventTypes, carrier: Optional[Dict[str, str]] = None):
        self.event_type = event_type
        self.carrier = carrier if carrier is not None else {}

    def to_string(self) -> str:
        return self.event_type.get_string()

    def equals(self, event_type: EventTypes) -> bool:
        """
        Unknown events will never equal other events.
        """
        if self.event_type == EventTypes.UNKNOWN:
            return False
        return self.event_type == event_type

    def __repr__(self):
        return f"_EventSource({self.to_string()!r}, {self.carrier!r})"


def get_first_record(event):
    if not isinstance(event, dict):
        return None
    records = event.get("Records")
    if isinstance(records, list) and len(records) > 0:
        return records[0]


def get_client_context_custom(lambda_context) -> Optional[Mapping]:
    """
    Return the `Custom` mapping of the client context sent with a
    Lambda.Invoke() call, or None.

    The Python runtime exposes it as `context.client_context.custom`. Dict
    shaped client contexts, as passed by local emulators, are accepted too.
    """
    client_context = getattr(lambda_context, "client_context", None)
    if client_context is None:
        return None
    if isinstance(client_context, Mapping):
        custom = client_context.get("Custom", client_context.get("custom"))
    else:
        custom = getattr(client_context, "custom", None)
    if isinstance(custom, Mapping):
        return custom
    return None


def _flatten_carrier(mapping: Mapping) -> Dict[str, str]:
    return {
        str(key): val for key, val in mapping.items() if isinstance(val, str)
    }


def _queue_trace_header(event) -> Optional[str]:
    record = get_first_record(event)
    if not isinstance(record, dict):
        return None
    attributes = record.get("attributes")
    if not isinstance(attributes, Mapping):
        return None
    trace_header = attributes.get(TraceHeader.SQS_ATTRIBUTE)
    if trace_header and isinstance(trace_header, str):
        return trace_header
    return None


def parse_event_source(event: Any, lambda_context: Any = None) -> _EventSource:
    """Determines where the trace context of an invocation lives.

    Checked in order, first match wins:

    - queue: the first record of `Records` carries an `AWSTraceHeader`
      attribute. The carrier holds it under `x-amzn-trace-id`.
    - direct-invoke: the Lambda context has a client context `Custom`
      mapping, as sent by Lambda.Invoke(). The carrier is that mapping.
    - gateway: the event has a `headers` mapping. The carrier is that mapping.

    Anything else is unknown, with an empty carrier.
    """
    trace_header = _queue_trace_header(event)
    if trace_header is not None:
        return _EventSource(EventTypes.QUEUE, {TraceHeader.XRAY: trace_header})

    custom = get_client_context_custom(lambda_context)
    if custom is not None:
        return _EventSource(EventTypes.DIRECT_INVOKE, _flatten_carrier(custom))

    if isinstance(event, dict):
        headers = event.get("headers")
        if isinstance(headers, Mapping):
            return _EventSource(EventTypes.GATEWAY, _flatten_carrier(headers))
        if headers is not None:
            logger.debug("Ignoring event headers of type %s", type(headers).__name__)

    return _EventSource(EventTypes.UNKNOWN)
