[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "xyutools"
version = "0.1.0"
description = "Utility toolkit for field services: logging, files, Modbus, AMF3, camera snapshots, agent messages, service control and archives"
requires-python = ">=3.10"
keywords = [
    "modbus",
    "modbus-tcp",
    "modbus-rtu",
    "crc16",
    "amf3",
    "logging",
    "digest-auth",
    "service-agent",
]
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
    "Topic :: Software Development :: Libraries",
    "Topic :: System :: Networking",
]
dependencies = [
    "requests>=2.28",
    "pyserial>=3.5",
]

[project.optional-dependencies]
test = [
    "pytest>=7.0",
    "responses>=0.23",
]

[tool.hatch.build.targets.wheel]
packages = ["xyutools"]

[tool.hatch.build.targets.sdist]
include = ["xyutools", "tests"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
