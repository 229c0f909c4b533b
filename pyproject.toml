[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "dungeonprops"
version = "0.1.0"
description = "A first-person walk through a walled dungeon room scattered with grass billboards and rocks, with line-of-sight and frustum culling."
requires-python = ">=3.10"
dependencies = [
    "pyglet",
]
keywords = ["game", "first-person", "3d", "culling", "line-of-sight", "pyglet"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment :: First Person Shooters",
    "Topic :: Multimedia :: Graphics :: 3D Rendering",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
dungeonprops = "dungeonprops.app:main"

[tool.hatch.build.targets.wheel]
packages = ["dungeonprops"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
