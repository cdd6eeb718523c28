[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "scpikit"
version = "2.0.0"
description = "SCPI error queue, expression parsing, channel-list expansion, VXI-11 XDR messages and a VXI-11 device core"
requires-python = ">=3.10"
dependencies = []
keywords = ["scpi", "ieee488", "vxi11", "xdr", "instrument", "channel-list"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Interface Engine/Protocol Translator",
]

[project.optional-dependencies]
test = ["pytest", "hypothesis"]

[tool.hatch.build.targets.wheel]
packages = ["scpikit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
strict = true
