# Unless explicitly stated otherwise all files in this repository are licensed
# under the Apache License Version 2.0.
# This product includes software developed at Datadog (https://www.datadoghq.com/).
# Copyright 2019 Datadog, Inc.
import logging

from otel_lambda.config import config
from otel_lambda.constants import HookAttributes, RESULT_EVENT_NAME
from otel_lambda.tag_object import to_event_attributes

logger = logging.getLogger(__name__)


def get_function_name(lambda_context):
    function_name = getattr(lambda_context, "function_name", None)
    if isinstance(function_name, str) and function_name:
        return function_name
    return config.function_name


def request_hook(span, event, lambda_context):
    """Runs on the invocation span before the handler."""
    span.set_attribute(HookAttributes.REQUEST, HookAttributes.REQUEST_VALUE)
    span.update_name(f"{get_function_name(lambda_context)} handler")


def response_hook(span, err, res):
    """Runs on the invocation span after the handler, successful or not."""
    if isinstance(err, Exception):
        span.set_attribute(HookAttributes.ERROR, str(err))
    if res is not None:
        span.add_event(RESULT_EVENT_NAME, to_event_attributes(res))
    span.set_attribute(HookAttributes.RESPONSE, HookAttributes.RESPONSE_VALUE)
