[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "gridslam"
version = "0.1.0"
description = "Robot log reading, sensor layouts, particle filter helpers and occupancy cell statistics for grid-based FastSLAM"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "slam",
    "fastslam",
    "particle-filter",
    "robotics",
    "laser",
    "odometry",
    "carmen",
    "occupancy-grid",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Artificial Intelligence",
    "Topic :: Scientific/Engineering",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
gridslam-log-test = "gridslam.tools:log_test_main"
gridslam-log-plot = "gridslam.tools:log_plot_main"
gridslam-rdk2carmen = "gridslam.tools:rdk2carmen_main"
gridslam-scanstudio2carmen = "gridslam.tools:scanstudio2carmen_main"

[tool.hatch.build.targets.wheel]
packages = ["gridslam"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
