[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "todocli"
version = "0.1.0"
description = "A small command-line todo list that keeps tasks in a JSON file"
requires-python = ">=3.10"
keywords = ["todo", "tasks", "cli", "json", "productivity"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Office/Business :: Scheduling",
    "Topic :: Utilities",
]
dependencies = []

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
todo = "todocli.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["todocli"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
