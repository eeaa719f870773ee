import os

from setuptools import find_packages, setup


def read_file(filename):
    """Read a file in the package."""
    full_filename = os.path.join(
        os.path.abspath(os.path.dirname(__file__)), filename
    )
    with open(full_filename) as f:
        content = f.read()
    return content


name = "fastly-api-client"
version = "0.1.0"
description = "Client for the Fastly CDN REST API"
long_description = read_file("README.rst")
url = "https://docs.fastly.com/api/"
author = "fastly-api-client developers"
author_email = ""
license = "MIT"
classifiers = [
    "Development Status :: 4 - Beta",
    "Programming Language :: Python :: 3",
    "License :: OSI Approved :: MIT License",
    "Intended Audience :: Developers",
    "Topic :: Internet :: WWW/HTTP",
]
keywords = "fastly cdn purge vcl"

# Installation (runtime) requirements
install_requires = [
    "requests>=2.25",
    "structlog>=22.1",
    "pydantic>=1.10",
]

# Test dependencies
tests_require = [
    "pytest>=7",
    "responses>=0.23",
]

# Optional installation dependencies
extras_require = {
    # Recommended extra for development
    "dev": tests_require,
}

setup(
    name=name,
    version=version,
    description=description,
    long_description=long_description,
    long_description_content_type="text/x-rst",
    url=url,
    author=author,
    author_email=author_email,
    license=license,
    classifiers=classifiers,
    keywords=keywords,
    packages=find_packages(
        exclude=("tests", "tests.*", "integration_tests")
    ),
    python_requires=">=3.8",
    install_requires=install_requires,
    extras_require=extras_require,
)
