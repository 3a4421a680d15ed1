[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "simuverse"
version = "0.1.0"
description = "WGSL shader preprocessing, cameras, lights, scenes and buffer models for GPU simulations"
requires-python = ">=3.10"
keywords = ["wgsl", "shader", "preprocessor", "camera", "scene", "rendering", "simulation"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Graphics :: 3D Rendering",
]
dependencies = [
    "numpy",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
simuverse-wgsl = "simuverse.shader:main"

[tool.hatch.build.targets.wheel]
packages = ["simuverse"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
