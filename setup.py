"""Setup script for pytrackseg."""

from setuptools import setup, find_packages
import os

# Read version from _version.py
version = {}
with open(os.path.join("pytrackseg", "_version.py")) as f:
    exec(f.read(), version)

# Read README
with open("README.md", "r", encoding="utf-8") as f:
    long_description = f.read()

setup(
    name="pytrackseg",
    version=version["__version__"],
    description="Smoothing, noise filtering and movement segmentation of GPS traces",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*", "docs", "examples"]),
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Science/Research",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Python :: 3.13",
        "Topic :: Scientific/Engineering :: GIS",
        "Topic :: Software Development :: Libraries :: Python Modules",
    ],
    python_requires=">=3.10",
    install_requires=[
        "pandas>=1.5.0",
        "numpy>=1.22.0",
        "polars>=0.20.0",
        "pyarrow>=10.0.0",
        "pyproj>=3.0.0",
        "gpxpy>=1.5.0",
        "folium>=0.12.0",
        "matplotlib>=3.6.0",
        "tqdm>=4.60.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "pytrackseg=pytrackseg.cli:main",
        ],
    },
    keywords="gps gpx trajectory smoothing segmentation climb geospatial location-data",
    include_package_data=True,
    zip_safe=False,
)
