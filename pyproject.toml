[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "evmkit"
version = "0.10.0"
description = "EVM bytecode tools: opcode tables, EOF container validation, execution state and jump destination analysis"
requires-python = ">=3.10"
dependencies = []
keywords = ["ethereum", "evm", "bytecode", "eof", "opcodes", "jumpdest"]
classifiers = [
    "Development Status :: 3 - Alpha",
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
packages = ["evmkit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
