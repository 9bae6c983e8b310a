# The minor version corresponds to the Lambda layer version.
from otel_lambda.version import __version__  # noqa: F401
from otel_lambda.logger import initialize_logging


initialize_logging(__name__)
