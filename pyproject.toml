[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "stepkit"
version = "0.1.0"
description = "Small command-line tools and a headless glTF geometry viewer: a greeter, a calculator and an orbit-camera mesh loader"
requires-python = ">=3.10"
dependencies = [
    "numpy",
]
keywords = ["cli", "calculator", "greeting", "gltf", "glb", "3d", "camera"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Utilities",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
hello-cli = "stepkit.hello:main"
calc-cli = "stepkit.calculator:main"

[tool.hatch.build.targets.wheel]
packages = ["stepkit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
