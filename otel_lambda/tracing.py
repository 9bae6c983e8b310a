# Unless explicitly stated otherwise all files in this repository are licensed
# under the Apache License Version 2.0.
# This product includes software developed at Datadog (https://www.datadoghq.com/).
# Copyright 2019 Datadog, Inc.
import logging
import os
from typing import Any, Callable, Dict, List, Mapping, Optional

from opentelemetry import trace
from opentelemetry.baggage.propagation import W3CBaggagePropagator
from opentelemetry.context import Context, get_current
from opentelemetry.propagate import get_global_textmap, set_global_textmap
from opentelemetry.propagators.aws import AwsXRayPropagator
from opentelemetry.propagators.aws.aws_xray_propagator import TRACE_HEADER_KEY
from opentelemetry.propagators.composite import CompositePropagator
from opentelemetry.propagators.textmap import Getter, TextMapPropagator
from opentelemetry.trace.propagation.tracecontext import (
    TraceContextTextMapPropagator,
)

from otel_lambda.config import config
from otel_lambda.constants import LambdaEnv
from otel_lambda.trigger import EventTypes, _EventSource, parse_event_source
from otel_lambda.version import __version__

if config.ddtrace_otel_enabled:
    from ddtrace.opentelemetry import TracerProvider

    trace.set_tracer_provider(TracerProvider())


logger = logging.getLogger(__name__)

EventContextExtractor = Callable[[Any, Any], Context]


class CarrierGetter(Getter):
    """Reads values from a flat carrier dict.

    Lookups fall back to a case-insensitive match, since header names
    arrive in whatever case the caller used while propagators ask for a
    fixed spelling (`X-Amzn-Trace-Id`, `traceparent`).
    """

    def get(self, carrier: Mapping[str, str], key: str) -> Optional[List[str]]:
        val = carrier.get(key)
        if val is None:
            lowered = key.lower()
            for carrier_key, carrier_val in carrier.items():
                if carrier_key.lower() == lowered:
                    val = carrier_val
                    break
        if val is None:
            return None
        return [val]

    def keys(self, carrier: Mapping[str, str]) -> List[str]:
        return list(carrier.keys())


carrier_getter = CarrierGetter()


def build_propagator() -> TextMapPropagator:
    """W3C trace context and baggage, plus the X-Ray trace header."""
    return CompositePropagator(
        [
            TraceContextTextMapPropagator(),
            W3CBaggagePropagator(),
            AwsXRayPropagator(),
        ]
    )


def ensure_propagator():
    """
    Install the W3C + X-Ray propagator, unless OTEL_PROPAGATORS picked one.
    """
    if config.propagators:
        logger.debug("Keeping propagators from OTEL_PROPAGATORS=%s", config.propagators)
        return
    set_global_textmap(build_propagator())


def build_carrier(event, lambda_context) -> Dict[str, str]:
    return parse_event_source(event, lambda_context).carrier


def extract_event_context(event, lambda_context) -> Context:
    """
    Extract the upstream trace context of an invocation from the API Gateway
    headers, the Lambda.Invoke() client context or the SQS trace header,
    whichever the event carries.

    An event without any of them produces an empty carrier, in which case the
    propagator hands back the current context unchanged.
    """
    event_source = parse_event_source(event, lambda_context)
    logger.debug(
        "Extracting trace context from %s carrier with keys %s",
        event_source.to_string(),
        list(event_source.carrier.keys()),
    )
    return get_global_textmap().extract(
        event_source.carrier, context=get_current(), getter=carrier_getter
    )


def _get_xray_upstream_context() -> Optional[Context]:
    xray_env_var = os.environ.get(LambdaEnv.XRAY_TRACE_ID)
    if not xray_env_var:
        return None
    upstream_context = AwsXRayPropagator().extract({TRACE_HEADER_KEY: xray_env_var})
    span_context = trace.get_current_span(upstream_context).get_span_context()
    if span_context.is_valid and span_context.trace_flags.sampled:
        return upstream_context
    logger.debug("Ignoring unsampled X-Ray trace context %s", xray_env_var)
    return None


def determine_upstream_context(
    event,
    lambda_context,
    event_context_extractor: Optional[EventContextExtractor] = None,
    disable_aws_context_propagation: bool = False,
) -> Context:
    """Pick the parent context for the invocation span.

    Unless disabled, a sampled X-Ray context set by the Lambda runtime in
    _X_AMZN_TRACE_ID wins. Otherwise the context comes from the event.
    """
    if not disable_aws_context_propagation:
        upstream_context = _get_xray_upstream_context()
        if upstream_context is not None:
            logger.debug("Using X-Ray trace context from the Lambda runtime")
            return upstream_context

    extractor = event_context_extractor or extract_event_context
    try:
        return extractor(event, lambda_context)
    except Exception as e:
        logger.exception("The event context extractor failed with error %s", e)
        return get_current()


def get_span_kind(event_source: _EventSource) -> trace.SpanKind:
    if event_source.equals(EventTypes.QUEUE):
        return trace.SpanKind.CONSUMER
    return trace.SpanKind.SERVER


def get_tracer(tracer_provider=None) -> trace.Tracer:
    return trace.get_tracer(__name__, __version__, tracer_provider)


def flush(tracer_provider=None, timeout_millis: Optional[int] = None):
    """Force flush spans before the Lambda sandbox gets frozen."""
    if timeout_millis is None:
        timeout_millis = config.flush_timeout
    provider = tracer_provider or trace.get_tracer_provider()
    if not hasattr(provider, "force_flush"):
        logger.debug("TracerProvider %s has no force_flush method", provider)
        return
    try:
        provider.force_flush(timeout_millis)
    except Exception:
        logger.exception("TracerProvider failed to flush spans")
