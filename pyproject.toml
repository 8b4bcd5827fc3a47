[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "ixws"
version = "0.1.0"
description = "WebSocket building blocks: URL parsing, permessage-deflate options, HTTP headers, framing and a message queue, plus small Redis and Sentry clients"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "websocket",
    "rfc6455",
    "permessage-deflate",
    "rfc7692",
    "framing",
    "url",
    "redis",
    "sentry",
]
classifiers = [
    "Development Status :: 3 - Alpha",
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
packages = ["ixws"]

[tool.hatch.build.targets.sdist]
include = ["ixws", "tests", "pyproject.toml"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
