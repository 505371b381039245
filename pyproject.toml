[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "mettle"
version = "0.1.0"
description = "Test attributes, filters, matchers and result loggers for unit testing"
requires-python = ">=3.10"
dependencies = []
keywords = ["testing", "unit-testing", "matchers", "xunit", "filters"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Testing :: Unit",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["mettle"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
