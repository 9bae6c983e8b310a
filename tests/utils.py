import json
import os
from unittest.mock import MagicMock

event_samples = os.path.join(os.path.dirname(__file__), "event_samples", "")

function_arn = "arn:aws:lambda:us-west-1:123457598159:function:python-layer-test"


class ClientContext(object):
    """Shape of `context.client_context` in the Python Lambda runtime."""

    def __init__(self, custom=None, env=None, client=None):
        self.custom = custom
        self.env = env
        self.client = client


def get_mock_context(
    aws_request_id="request-id-1",
    function_name="python-layer-test",
    memory_limit_in_mb="256",
    invoked_function_arn=function_arn + ":1",
    function_version="1",
    client_context=None,
):
    lambda_context = MagicMock()
    lambda_context.aws_request_id = aws_request_id
    lambda_context.function_name = function_name
    lambda_context.memory_limit_in_mb = memory_limit_in_mb
    lambda_context.invoked_function_arn = invoked_function_arn
    lambda_context.function_version = function_version
    lambda_context.client_context = client_context
    return lambda_context


def load_event(name):
    with open(event_samples + name + ".json", "r") as event:
        return json.load(event)
