[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "gonggo"
version = "0.1.0"
description = "Request broker core that routes websocket client requests to named proxy services and keeps their responses"
requires-python = ">=3.10"
dependencies = []
keywords = ["broker", "websocket", "proxy", "request-routing", "sqlite"]
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
    "Topic :: Software Development :: Object Brokering",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["gonggo"]

[tool.hatch.build.targets.sdist]
include = ["gonggo", "tests"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]
