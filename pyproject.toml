[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "rviewer"
version = "0.1.0"
description = "Frame-by-frame viewer for simple text-described vector drawings, with SVG, PNG and video export"
requires-python = ">=3.10"
dependencies = []
keywords = ["visualization", "animation", "svg", "viewer", "debugging"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Visualization",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
rviewer = "rviewer.viewer:main"

[tool.hatch.build.targets.wheel]
packages = ["rviewer"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
