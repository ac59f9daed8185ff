[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "sbombastic"
version = "0.1.0"
description = "Reconcilers, resource types and helpers for keeping an SBOM and vulnerability report per container image"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "sbom",
    "spdx",
    "sarif",
    "vulnerability",
    "container",
    "registry",
    "reconciler",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Security",
    "Topic :: System :: Systems Administration",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["sbombastic"]

[tool.hatch.build.targets.sdist]
include = ["sbombastic", "tests", "README.md"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "I", "B", "UP", "SIM"]

[tool.mypy]
python_version = "3.10"
files = ["sbombastic"]
