[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "pau_ue"
version = "0.1.0"
description = "Underlying-event analysis tools for p+Au jet data: binning, BEMC geometry, histograms, detector response and event-activity classes"
requires-python = ">=3.10"
keywords = ["physics", "jets", "underlying event", "histogram", "detector response"]
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
    "Topic :: Scientific/Engineering :: Physics",
]
dependencies = [
    "numpy",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
pau-ue-compare-trees = "pau_ue.trees:main"

[tool.hatch.build.targets.wheel]
packages = ["pau_ue"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
