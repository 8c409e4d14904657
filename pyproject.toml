[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "chaumzkp"
version = "0.1.0"
description = "Chaum-Pedersen zero-knowledge proof protocol with a gRPC verifier server and prover client"
requires-python = ">=3.10"
keywords = ["zero-knowledge", "chaum-pedersen", "cryptography", "grpc", "discrete-logarithm"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Security :: Cryptography",
]
dependencies = [
    "grpcio",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
grpc-zkp-server = "chaumzkp.server:main"
grpc-zkp-client = "chaumzkp.client:main"

[tool.hatch.build.targets.wheel]
packages = ["chaumzkp"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
