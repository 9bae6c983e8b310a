from setuptools import setup
from os import path
from io import open

from otel_lambda import __version__

here = path.abspath(path.dirname(__file__))

with open(path.join(here, "README.md"), encoding="utf-8") as f:
    long_description = f.read()

setup(
    name="otel_lambda",
    version=__version__,
    description="OpenTelemetry trace context hooks for AWS Lambda",
    long_description=long_description,
    long_description_content_type="text/markdown",
    classifiers=[
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
    keywords="opentelemetry aws lambda layer tracing",
    packages=["otel_lambda"],
    python_requires=">=3.9, <4",
    install_requires=[
        "opentelemetry-api>=1.20.0",
        "opentelemetry-propagator-aws-xray>=1.0.1",
        "wrapt>=1.14.0",
        "ujson>=5.4.0",
        "ddtrace>=2.0.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "flake8>=6.0.0",
            "opentelemetry-sdk>=1.20.0",
        ],
    },
)
