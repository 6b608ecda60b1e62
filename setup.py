from setuptools import setup, find_packages

setup(
    name="seam_xmlrpc",
    version="0.1.0",
    description="XML-RPC client with pluggable HTTP transport and OpenTelemetry instrumentation",
    author="Seam XML-RPC Team",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "lxml>=4.9.0",
        "requests>=2.28.0",
        "opentelemetry-api>=1.14.0",
        "opentelemetry-sdk>=1.14.0",
        "opentelemetry-exporter-otlp>=1.14.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov",
            "black",
            "isort",
            "pylint",
        ],
        "test": [
            "pytest>=7.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "seam-xmlrpc=seam_xmlrpc.cli:main",
        ],
    },
    python_requires=">=3.9",
)
