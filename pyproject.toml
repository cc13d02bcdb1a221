[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "evmachine"
version = "0.1.0"
description = "A small stack-based bytecode virtual machine"
requires-python = ">=3.10"
dependencies = []
keywords = ["virtual machine", "bytecode", "interpreter", "stack machine"]
classifiers = [
    "Development Status :: 2 - Pre-Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Software Development :: Interpreters",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["evmachine"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
