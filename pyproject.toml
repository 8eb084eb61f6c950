[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "homiekit"
version = "0.1.0"
description = "Building blocks for Homie convention devices: configuration, validation, settings, nodes, publishing and timers"
requires-python = ">=3.10"
dependencies = []
keywords = ["homie", "mqtt", "iot", "home-automation", "configuration"]
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
    "Topic :: Home Automation",
    "Topic :: Software Development :: Libraries :: Python Modules",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["homiekit"]

[tool.pytest.ini_options]
addopts = "-ra"
