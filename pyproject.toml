[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "respcheck"
version = "0.1.0"
description = "Assertions and scripted test cases for checking Redis-compatible servers over the RESP protocol"
requires-python = ">=3.10"
dependencies = []
keywords = ["redis", "resp", "testing", "assertions", "protocol"]
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
    "Topic :: Software Development :: Testing",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["respcheck"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
