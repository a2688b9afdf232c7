[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "qtlogkit"
version = "1.6.0"
description = "Appenders, layouts and binary logging: console, file, rolling, database and asynchronous output"
requires-python = ">=3.10"
dependencies = []
keywords = ["logging", "appender", "layout", "binary logging", "rolling files"]
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
    "Topic :: System :: Logging",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["qtlogkit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
