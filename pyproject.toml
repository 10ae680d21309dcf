[build-system]
requires = ["setuptools>=68", "wheel"]
build-backend = "setuptools.build_meta"

[project]
name = "voxelcraft"
version = "0.1.0"
description = "Voxel world toolkit: AABB physics, procedural terrain, greedy chunk meshing and chunk streaming"
requires-python = ">=3.10"
dependencies = [
    "numpy",
]
keywords = ["voxel", "physics", "aabb", "terrain", "meshing", "chunks", "game"]
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
    "Topic :: Games/Entertainment",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.setuptools.packages.find]
include = ["voxelcraft*"]

[tool.pytest.ini_options]
addopts = "-ra"
