[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "reachmap"
version = "0.1.0"
description = "Reachability maps for robot arms: workspace discretization, IK filtering, centering, display models and base placement helpers"
requires-python = ">=3.10"
dependencies = []
keywords = ["robotics", "reachability", "workspace", "inverse kinematics", "base placement"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["reachmap"]

[tool.pytest.ini_options]
addopts = "-ra"
