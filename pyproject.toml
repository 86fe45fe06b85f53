[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "barscope"
version = "0.1.0"
description = "Building blocks of a Handlebars-style template engine: JSON values, paths, contexts, block scopes, grammar and built-in helpers"
requires-python = ">=3.10"
dependencies = []
keywords = ["handlebars", "templates", "mustache", "json", "text-generation"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Text Processing :: General",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["barscope"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
