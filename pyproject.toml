[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "stridecount"
version = "0.1.0"
description = "Step counting and pedestrian dead reckoning from wrist-worn accelerometer, gyroscope and magnetometer logs"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "pedometer",
    "step counter",
    "accelerometer",
    "imu",
    "dead reckoning",
    "madgwick",
    "signal processing",
    "wearables",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Information Analysis",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
stridecount = "stridecount.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["stridecount"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
