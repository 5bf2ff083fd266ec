[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "labkit"
version = "0.1.0"
description = "Cache simulator, matrix-transpose tracing and scoring, and pipelined processor building blocks for systems coursework"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "cache",
    "simulator",
    "lru",
    "matrix-transpose",
    "memory-trace",
    "pipeline",
    "computer-systems",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Education",
    "Topic :: System :: Emulators",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
labkit-csim = "labkit.csim:main"
labkit-tracegen = "labkit.tracegen:main"
labkit-test-trans = "labkit.driver:main"
labkit-ncopy = "labkit.ncopy:main"

[tool.hatch.build.targets.wheel]
packages = ["labkit"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 88
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
