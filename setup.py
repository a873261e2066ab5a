"""Setup configuration for symmetric-pair-store package."""

import os
from setuptools import setup, find_packages

# Read the README for PyPI
with open("README_PYPI.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

# Read version from package
version_file = os.path.join(os.path.dirname(__file__), "pairstore", "__init__.py")
with open(version_file) as f:
    for line in f:
        if line.startswith("__version__"):
            version = line.split("=")[1].strip().strip('"').strip("'")
            break
    else:
        version = "0.1.0"

setup(
    name="symmetric-pair-store",
    version=version,
    description="Symmetric pairwise similarity store with lazy all-pairs scoring",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Topic :: Scientific/Engineering :: Information Analysis",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Operating System :: OS Independent",
    ],
    python_requires=">=3.9",
    install_requires=[
        "pyyaml>=6.0",
        "click>=8.0",
        "rich>=13.0",
        "numpy>=1.21.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0",
            "coverage>=6.0",
            "ruff>=0.1",
            "mypy>=1.0",
            "black>=23.0",
            "isort>=5.0",
            "build>=0.10",
            "twine>=4.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "pairstore=pairstore.cli:main",
        ],
    },
    include_package_data=True,
    package_data={
        "pairstore": ["py.typed"],
    },
    keywords=[
        "similarity",
        "pairwise",
        "symmetric-matrix",
        "top-k",
        "recommender",
    ],
)
