[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "seldon_operator"
version = "0.3.2"
description = "SeldonDeployment resource model, naming rules, in-memory client and listers for machine learning deployments"
requires-python = ">=3.10"
dependencies = []
keywords = ["seldon", "kubernetes", "machine-learning", "deployment", "custom-resource"]
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
    "Typing :: Typed",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["seldon_operator"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
