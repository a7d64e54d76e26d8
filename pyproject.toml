[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "sockwave"
version = "0.1.0"
description = "WebSocket (RFC 6455) frames, messages and connection state over an already upgraded byte stream."
requires-python = ">=3.10"
dependencies = []
keywords = ["websocket", "rfc6455", "protocol", "frames", "networking"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["sockwave"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
