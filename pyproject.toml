[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "tsnat"
version = "0.1.0"
description = "Parser, AST and type system for a TypeScript-like language"
requires-python = ">=3.10"
dependencies = []
keywords = ["typescript", "parser", "ast", "type-checker", "compiler"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Compilers",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["tsnat"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
