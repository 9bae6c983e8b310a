# Unless explicitly stated otherwise all files in this repository are licensed
# under the Apache License Version 2.0.
# This product includes software developed at Datadog (https://www.datadoghq.com/).
# Copyright 2019 Datadog, Inc.
import logging
import traceback

from opentelemetry import context as otel_context
from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

from otel_lambda.config import config
from otel_lambda.constants import SpanAttributes
from otel_lambda.instrumentation import (
    EVENT_CONTEXT_EXTRACTOR,
    REQUEST_HOOK,
    RESPONSE_HOOK,
    configure_lambda_instrumentation,
    resolve_disable_aws_context_propagation,
)
from otel_lambda.tracing import (
    determine_upstream_context,
    ensure_propagator,
    flush,
    get_span_kind,
    get_tracer,
)
from otel_lambda.trigger import parse_event_source

logger = logging.getLogger(__name__)

"""
Usage:

from otel_lambda.wrapper import lambda_tracing_wrapper

@lambda_tracing_wrapper
def my_lambda_handle(event, context):
    return {"statusCode": 200}
"""


class _NoopDecorator(object):
    def __init__(self, func, *args, **kwargs):
        self.func = func

    def __call__(self, *args, **kwargs):
        return self.func(*args, **kwargs)


class _LambdaDecorator(object):
    """
    Decorator running a handler inside an invocation span, with the request
    and response hooks and the event context extractor of an instrumentation
    configuration record.
    """

    _force_wrap = False

    def __new__(cls, func, instrumentation_config=None, tracer_provider=None):
        """
        If the decorator is accidentally applied to the same function multiple times,
        wrap only once.

        If _force_wrap, always return a real decorator, useful for unit tests.
        """
        try:
            if cls._force_wrap or not isinstance(func, _LambdaDecorator):
                wrapped = super(_LambdaDecorator, cls).__new__(cls)
                logger.debug("lambda_tracing_wrapper wrapped")
                return wrapped
            else:
                logger.debug("lambda_tracing_wrapper already wrapped")
                return _NoopDecorator(func)
        except Exception as e:
            logger.error(format_err_with_traceback(e))
            return func

    def __init__(self, func, instrumentation_config=None, tracer_provider=None):
        """Executes when the wrapped function gets wrapped"""
        try:
            self.func = func
            if instrumentation_config is None:
                instrumentation_config = configure_lambda_instrumentation()
            self.instrumentation_config = instrumentation_config
            self.request_hook = instrumentation_config.get(REQUEST_HOOK)
            self.response_hook = instrumentation_config.get(RESPONSE_HOOK)
            self.event_context_extractor = instrumentation_config.get(
                EVENT_CONTEXT_EXTRACTOR
            )
            self.disable_aws_context_propagation = (
                resolve_disable_aws_context_propagation(instrumentation_config)
            )
            self.tracer_provider = tracer_provider
            self.tracer = get_tracer(tracer_provider)
            ensure_propagator()
            self.handler_name = get_handler_name(func)
            logger.debug("lambda_tracing_wrapper initialized")
        except Exception as e:
            logger.error(format_err_with_traceback(e))

    def __call__(self, event, context, **kwargs):
        """Executes when the wrapped function gets called"""
        if not config.trace_enabled:
            return self.func(event, context, **kwargs)
        span, token = self._before(event, context)
        err = None
        response = None
        try:
            response = self.func(event, context, **kwargs)
            return response
        except Exception as e:
            err = e
            raise
        finally:
            self._after(span, token, err, response)

    def _before(self, event, context):
        span = None
        token = None
        try:
            event_source = parse_event_source(event, context)
            upstream_context = determine_upstream_context(
                event,
                context,
                self.event_context_extractor,
                self.disable_aws_context_propagation,
            )
            span = self.tracer.start_span(
                self.handler_name,
                context=upstream_context,
                kind=get_span_kind(event_source),
                attributes=_get_invocation_attributes(context, event_source),
            )
            token = otel_context.attach(
                trace.set_span_in_context(span, upstream_context)
            )
            if self.request_hook is not None:
                self.request_hook(span, event, context)
            logger.debug("lambda_tracing_wrapper _before() done")
        except Exception as e:
            logger.error(format_err_with_traceback(e))
        return span, token

    def _after(self, span, token, err, response):
        try:
            if span is not None:
                if err is not None:
                    span.record_exception(err)
                    span.set_status(Status(StatusCode.ERROR, str(err)))
                if self.response_hook is not None:
                    self.response_hook(span, err, response)
        except Exception as e:
            logger.error(format_err_with_traceback(e))
        finally:
            self._finish(span, token)

    def _finish(self, span, token):
        try:
            if span is not None:
                span.end()
            if token is not None:
                otel_context.detach(token)
            flush(self.tracer_provider)
            logger.debug("lambda_tracing_wrapper _after() done")
        except Exception as e:
            logger.error(format_err_with_traceback(e))


def _get_invocation_attributes(context, event_source):
    attributes = {SpanAttributes.TRIGGER: event_source.to_string()}
    request_id = getattr(context, "aws_request_id", None)
    if isinstance(request_id, str):
        attributes[SpanAttributes.INVOCATION_ID] = request_id
    function_arn = getattr(context, "invoked_function_arn", None)
    if isinstance(function_arn, str):
        attributes[SpanAttributes.RESOURCE_ID] = function_arn
    return attributes


def get_handler_name(func):
    module_name = getattr(func, "__module__", None)
    func_name = getattr(func, "__name__", None) or type(func).__name__
    if module_name:
        return f"{module_name}.{func_name}"
    return func_name


def format_err_with_traceback(e):
    tb = traceback.format_exc().replace("\n", "\r")
    return f"Error {e}. Traceback: {tb}"


lambda_tracing_wrapper = _LambdaDecorator
