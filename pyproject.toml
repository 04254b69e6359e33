[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "aikari"
version = "0.0.1"
description = "Shared infrastructure for threaded modules: message queues, inter-thread messaging, config files, logging, DoH lookups, hosts-file entries and MQTT packet helpers"
requires-python = ">=3.10"
keywords = ["mqtt", "message-queue", "thread-pool", "config", "logging", "doh", "hosts"]
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
    "Topic :: Software Development :: Libraries :: Python Modules",
]
dependencies = [
    "requests",
]

[project.optional-dependencies]
test = [
    "pytest",
    "responses",
]

[tool.hatch.build.targets.wheel]
packages = ["aikari"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
