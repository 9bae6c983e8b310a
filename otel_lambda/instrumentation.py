# Unless explicitly stated otherwise all files in this repository are licensed
# under the Apache License Version 2.0.
# This product includes software developed at Datadog (https://www.datadoghq.com/).
# Copyright 2019 Datadog, Inc.
"""
Usage:

from otel_lambda.instrumentation import configure_lambda_instrumentation
from otel_lambda.patch import instrument

instrument(configure_lambda_instrumentation())
"""
import logging

from otel_lambda.config import config
from otel_lambda.hooks import request_hook, response_hook
from otel_lambda.tracing import extract_event_context

logger = logging.getLogger(__name__)

REQUEST_HOOK = "request_hook"
RESPONSE_HOOK = "response_hook"
DISABLE_AWS_CONTEXT_PROPAGATION = "disable_aws_context_propagation"
EVENT_CONTEXT_EXTRACTOR = "event_context_extractor"


def configure_lambda_instrumentation(**instrumentation_config):
    """Build the instrumentation configuration record.

    Any options passed in are kept. The hooks, the extractor and the
    propagation flag are always set by this function, replacing caller
    values for those keys.
    """
    return {
        **instrumentation_config,
        REQUEST_HOOK: request_hook,
        RESPONSE_HOOK: response_hook,
        # the parent comes from the event, not from the X-Ray env var
        DISABLE_AWS_CONTEXT_PROPAGATION: True,
        EVENT_CONTEXT_EXTRACTOR: extract_event_context,
    }


def resolve_disable_aws_context_propagation(instrumentation_config):
    """OTEL_LAMBDA_DISABLE_AWS_CONTEXT_PROPAGATION, when set, wins."""
    if config.disable_aws_context_propagation is not None:
        return config.disable_aws_context_propagation
    return bool(instrumentation_config.get(DISABLE_AWS_CONTEXT_PROPAGATION, False))
