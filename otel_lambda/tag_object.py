# Unless explicitly stated otherwise all files in this repository are licensed
# under the Apache License Version 2.0.
# This product includes software developed at Datadog (https://www.datadoghq.com/).
# Copyright 2021 Datadog, Inc.

import logging
from decimal import Decimal

import ujson as json

from otel_lambda.config import config

redactable_keys = ["authorization", "x-authorization", "password", "token"]
max_string_length = 5000
scalar_key = "result"
logger = logging.getLogger(__name__)


def to_event_attributes(obj, max_depth=None):
    """Flatten a handler result into span event attributes.

    Nested mappings and lists become dotted keys, JSON strings are decoded
    and flattened too. A scalar result is stored under `result`.
    """
    if max_depth is None:
        max_depth = config.result_max_depth
    attributes = {}
    if _is_container(obj) or _should_try_string(obj):
        _flatten(attributes, "", obj, 0, max_depth)
    else:
        _flatten(attributes, scalar_key, obj, 0, max_depth)
    return attributes


def _is_container(obj):
    return (
        isinstance(obj, (list, tuple))
        or hasattr(obj, "items")
        or hasattr(obj, "to_dict")
    )


def _join(prefix, key):
    if not prefix:
        return str(key)
    return "{}.{}".format(prefix, key)


def _flatten(attributes, key, obj, depth, max_depth):
    if obj is None:
        return
    if depth >= max_depth:
        attributes[key or scalar_key] = _redact_val(
            key, str(obj)[0:max_string_length]
        )
        return
    depth += 1
    if _should_try_string(obj):
        if isinstance(obj, bytes):
            obj = obj.decode("utf-8", errors="replace")
        try:
            parsed = json.loads(obj)
        except ValueError:
            parsed = None
        if _is_container(parsed):
            return _flatten(attributes, key, parsed, depth, max_depth)
        attributes[key or scalar_key] = _redact_val(key, obj[0:max_string_length])
        return
    if isinstance(obj, (bool, int, float)):
        attributes[key] = _redact_val(key, obj)
        return
    if isinstance(obj, Decimal):
        attributes[key] = _redact_val(key, str(obj))
        return
    if isinstance(obj, (list, tuple)):
        for k, v in enumerate(obj):
            _flatten(attributes, _join(key, k), v, depth, max_depth)
        return
    if hasattr(obj, "items"):
        for k, v in obj.items():
            _flatten(attributes, _join(key, k), v, depth, max_depth)
        return
    if hasattr(obj, "to_dict"):
        for k, v in obj.to_dict().items():
            _flatten(attributes, _join(key, k), v, depth, max_depth)
        return
    try:
        value_as_str = str(obj)
    except Exception:
        value_as_str = "UNKNOWN"
    attributes[key] = _redact_val(key, value_as_str)


def _should_try_string(obj):
    return isinstance(obj, (str, bytes))


def _redact_val(k, v):
    split_key = k.split(".").pop() or k
    if split_key.lower() in redactable_keys:
        return "redacted"
    return v
