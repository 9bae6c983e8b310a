import logging
import os

from otel_lambda.constants import LambdaEnv

logger = logging.getLogger(__name__)


def _get_env(key, default=None, cast=None, depends_on_tracing=False):
    @property
    def _getter(self):
        if not hasattr(self, prop_key):
            val = self._resolve_env(key, default, cast, depends_on_tracing)
            setattr(self, prop_key, val)
        return getattr(self, prop_key)

    prop_key = f"_config_{key}"
    return _getter


def as_bool(val):
    return val.strip().lower() in ("true", "1", "t")


def as_optional_bool(val):
    if val is None or not val.strip():
        return None
    return as_bool(val)


def as_handler_path(val):
    """Turn `path/to/module.function` into a (module, function) tuple."""
    if not val:
        return None
    parts = val.rsplit(".", 1)
    if len(parts) != 2 or not all(parts):
        raise ValueError(f"Value {val} is not a valid handler path")
    mod_name, func_name = parts
    return mod_name.replace("/", "."), func_name


class Config:
    def _resolve_env(self, key, default=None, cast=None, depends_on_tracing=False):
        if depends_on_tracing and not self.trace_enabled:
            return False
        val = os.environ.get(key, default)
        if cast is not None:
            try:
                val = cast(val)
            except (ValueError, TypeError):
                msg = (
                    "Failed to cast environment variable '%s' with "
                    "value '%s' to type %s. Using default value '%s'."
                )
                logger.warning(msg, key, val, cast.__name__, default)
                val = default
        return val

    trace_enabled = _get_env("OTEL_LAMBDA_TRACE_ENABLED", "true", as_bool)
    disable_aws_context_propagation = _get_env(
        "OTEL_LAMBDA_DISABLE_AWS_CONTEXT_PROPAGATION", None, as_optional_bool
    )
    flush_timeout = _get_env(
        "OTEL_INSTRUMENTATION_AWS_LAMBDA_FLUSH_TIMEOUT", 30000, int
    )
    result_max_depth = _get_env("OTEL_LAMBDA_RESULT_MAX_DEPTH", 10, int)
    propagators = _get_env("OTEL_PROPAGATORS")

    ddtrace_otel_enabled = _get_env(
        "DD_TRACE_OTEL_ENABLED", "false", as_bool, depends_on_tracing=True
    )

    aws_lambda_function_name = _get_env(LambdaEnv.FUNCTION_NAME)

    @property
    def function_name(self):
        if not hasattr(self, "_config_function_name"):
            if self.aws_lambda_function_name is None:
                self._config_function_name = "function"
            else:
                self._config_function_name = self.aws_lambda_function_name
        return self._config_function_name

    @property
    def lambda_handler(self):
        """(module, function) named by ORIG_HANDLER or _HANDLER, or None."""
        if not hasattr(self, "_config_lambda_handler"):
            path = os.environ.get(LambdaEnv.ORIG_HANDLER) or os.environ.get(
                LambdaEnv.HANDLER
            )
            self._config_lambda_handler = as_handler_path(path)
        return self._config_lambda_handler

    def _reset(self):
        for attr in dir(self):
            if attr.startswith("_config_"):
                delattr(self, attr)


config = Config()
