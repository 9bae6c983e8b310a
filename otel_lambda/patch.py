import logging
from importlib import import_module

from wrapt import wrap_function_wrapper as wrap

from otel_lambda.config import config
from otel_lambda.instrumentation import configure_lambda_instrumentation
from otel_lambda.wrapper import _LambdaDecorator

logger = logging.getLogger(__name__)

_instrumented_handler = None


class InstrumentationError(Exception):
    pass


def instrument(instrumentation_config=None, tracer_provider=None):
    """
    Patch the Lambda handler named by ORIG_HANDLER or _HANDLER in place so
    every invocation runs through `instrumentation_config`.

    Must run before the Lambda runtime resolves the handler, e.g. from the
    module the runtime loads first.
    """
    global _instrumented_handler
    if _instrumented_handler is not None:
        logger.debug("Handler %s already instrumented", ".".join(_instrumented_handler))
        return

    handler = config.lambda_handler
    if handler is None:
        raise InstrumentationError(
            "Neither ORIG_HANDLER nor _HANDLER is set, can't find the handler"
        )
    if instrumentation_config is None:
        instrumentation_config = configure_lambda_instrumentation()

    mod_name, func_name = handler
    module = import_module(mod_name)
    decorator = _LambdaDecorator(
        getattr(module, func_name), instrumentation_config, tracer_provider
    )

    def _wrap_lambda_handler(func, instance, args, kwargs):
        return decorator(*args, **kwargs)

    wrap(module, func_name, _wrap_lambda_handler)
    _instrumented_handler = handler
    logger.debug("Instrumented handler %s.%s", mod_name, func_name)


def uninstrument():
    """Restore the handler patched by `instrument`."""
    global _instrumented_handler
    if _instrumented_handler is None:
        return
    mod_name, func_name = _instrumented_handler
    module = import_module(mod_name)
    patched = getattr(module, func_name)
    original = getattr(patched, "__wrapped__", None)
    if original is not None:
        setattr(module, func_name, original)
    _instrumented_handler = None
    logger.debug("Uninstrumented handler %s.%s", mod_name, func_name)
