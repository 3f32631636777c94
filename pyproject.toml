[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "galene"
version = "0.1.0"
description = "Token handling, conditional-request and HTTP helpers for a videoconferencing server"
requires-python = ">=3.10"
keywords = ["videoconference", "jwt", "tokens", "etag", "http"]
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
    "Topic :: Communications :: Conferencing",
]
dependencies = [
    "pyjwt",
    "cryptography",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["galene"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
