# Unless explicitly stated otherwise all files in this repository are licensed
# under the Apache License Version 2.0.
# This product includes software developed at Datadog (https://www.datadoghq.com/).
# Copyright 2019 Datadog, Inc.


# Attributes set on the invocation span by the request and response hooks
class HookAttributes(object):
    REQUEST = "custom.req"
    REQUEST_VALUE = "my request hook attribute"
    RESPONSE = "custom.resp"
    RESPONSE_VALUE = "my response hook attr"
    ERROR = "faas.error"


# Span event recording the handler's return value
RESULT_EVENT_NAME = "Result"


# Attributes set on the invocation span by the wrapper
class SpanAttributes(object):
    INVOCATION_ID = "faas.invocation_id"
    RESOURCE_ID = "cloud.resource_id"
    TRIGGER = "faas.trigger"


# Trace header carried by SQS records and X-Ray enabled callers. Lowercase,
# carrier lookups are case-insensitive.
class TraceHeader(object):
    XRAY = "x-amzn-trace-id"
    SQS_ATTRIBUTE = "AWSTraceHeader"


# Variables set by the Lambda runtime
class LambdaEnv(object):
    XRAY_TRACE_ID = "_X_AMZN_TRACE_ID"
    HANDLER = "_HANDLER"
    ORIG_HANDLER = "ORIG_HANDLER"
    FUNCTION_NAME = "AWS_LAMBDA_FUNCTION_NAME"
