[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "slopekit"
version = "0.1.0"
description = "Core pieces of a downhill sledding game: vectors, a state machine, tagged-line config files, translations, screen modes and a jointed character model."
requires-python = ">=3.10"
dependencies = []
keywords = ["game", "sledding", "character", "configuration", "translation", "state-machine"]
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
    "Topic :: Games/Entertainment :: Simulation",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["slopekit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
