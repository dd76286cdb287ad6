[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "linkemu"
version = "0.1.0"
description = "Incremental HTTP/1.1 message handling and command-line parsing for network link emulation tools"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "network",
    "emulation",
    "http",
    "parser",
    "chunked",
    "command-line",
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
    "Topic :: System :: Networking",
    "Topic :: Internet :: WWW/HTTP",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["linkemu"]

[tool.hatch.build.targets.sdist]
include = ["linkemu", "tests", "README.md"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
