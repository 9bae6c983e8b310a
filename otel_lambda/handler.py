# Unless explicitly stated otherwise all files in this repository are licensed
# under the Apache License Version 2.0.
# This product includes software developed at Datadog (https://www.datadoghq.com/).
# Copyright 2020 Datadog, Inc.

from importlib import import_module

import os

from otel_lambda.config import as_handler_path
from otel_lambda.instrumentation import configure_lambda_instrumentation
from otel_lambda.wrapper import lambda_tracing_wrapper


class HandlerError(Exception):
    pass


path = os.environ.get("OTEL_LAMBDA_HANDLER", None)
if path is None:
    raise HandlerError(
        "OTEL_LAMBDA_HANDLER is not defined. Can't use prebuilt tracing handler"
    )
try:
    (mod_name, handler_name) = as_handler_path(path)
except (ValueError, TypeError):
    raise HandlerError(f"Value {path} for OTEL_LAMBDA_HANDLER has invalid format.")

handler_module = import_module(mod_name)
handler_func = getattr(handler_module, handler_name)

handler = lambda_tracing_wrapper(handler_func, configure_lambda_instrumentation())
