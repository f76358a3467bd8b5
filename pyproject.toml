[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "seisassoc"
version = "0.1.0"
description = "Building blocks for seismic phase association: DBSCAN clustering, bilinear travel-time tables, station files and pick handling"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "seismology",
    "association",
    "dbscan",
    "travel time",
    "bilinear interpolation",
    "phase picks",
    "static corrections",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Scientific/Engineering :: Physics",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["seisassoc"]

[tool.pytest.ini_options]
addopts = "-ra"
