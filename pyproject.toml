[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "menuforge"
version = "0.1.0"
description = "Design embedded menu trees, run them on a simulated key-driven navigator and generate C/C++ menu code."
requires-python = ">=3.10"
dependencies = []
keywords = [
    "menu",
    "embedded",
    "oled",
    "code generation",
    "navigator",
    "microcontroller",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Code Generators",
    "Topic :: Software Development :: Embedded Systems",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["menuforge"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]
