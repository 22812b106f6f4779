[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "concentratord"
version = "4.5.0"
description = "Building blocks for a LoRa gateway concentrator daemon: JIT downlink queue, duty-cycle regulation, GNSS device handling, signals and reset control."
requires-python = ">=3.10"
dependencies = []
keywords = ["lora", "lorawan", "gateway", "concentrator", "duty-cycle", "jit-queue", "gnss", "gpsd"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: Telecommunications Industry",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Communications",
    "Topic :: Software Development :: Libraries :: Python Modules",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["concentratord"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
