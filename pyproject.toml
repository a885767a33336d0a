[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "diego"
version = "0.1.0"
description = "Generate Go command-line and environment variable parsers from a JSON schema or a Go struct definition."
requires-python = ">=3.10"
dependencies = []
keywords = ["codegen", "flags", "environment", "cli", "arguments", "generator", "go"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Code Generators",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
diego = "diego.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["diego"]

[tool.pytest.ini_options]
addopts = "-ra"
