[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "runtimeguard"
version = "0.1.0"
description = "Building blocks for a runtime security monitor: rulesets, alert outputs, a response queue, a watchdog timer and capture statistics."
requires-python = ">=3.10"
dependencies = []
keywords = ["security", "runtime", "rules", "alerts", "monitoring", "watchdog"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: System Administrators",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Security",
    "Topic :: System :: Monitoring",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["runtimeguard"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
