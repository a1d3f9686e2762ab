#!/usr/bin/env python3
"""
Setup script for the absorbingLP package.

This setup.py provides a traditional installation method for the
partially absorbing label propagation library.
"""

from setuptools import setup, find_packages
import re


def read_readme():
    """Read README.md for long description."""
    try:
        with open("README.md", "r", encoding="utf-8") as fh:
            return fh.read()
    except FileNotFoundError:
        return "Partially absorbing label propagation for active learning on graphs"


def get_version():
    """Extract __version__ from src/absorbingLP/__init__.py without importing it."""
    try:
        with open("src/absorbingLP/__init__.py", "r", encoding="utf-8") as f:
            match = re.search(r'^__version__\s*=\s*["\']([^"\']+)["\']', f.read(), re.MULTILINE)
        return match.group(1) if match else "0.1.0"
    except FileNotFoundError:
        return "0.1.0"


setup(
    name="absorbingLP",
    version=get_version(),
    description="Partially absorbing label propagation for active learning on graphs",
    long_description=read_readme(),
    long_description_content_type="text/markdown",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Science/Research",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Scientific/Engineering :: Information Analysis",
        "Topic :: Scientific/Engineering :: Artificial Intelligence",
    ],
    python_requires=">=3.9",
    install_requires=[
        "networkit>=11.0",
        "polars>=0.20.0",
        "numpy>=1.24.0",
        "scipy>=1.10.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
        "dev": [
            "pytest>=7.0",
            "pytest-cov>=4.0",
            "ruff>=0.1.0",
            "black>=23.0",
            "mypy>=1.0",
        ],
    },
    include_package_data=True,
    zip_safe=False,
)
