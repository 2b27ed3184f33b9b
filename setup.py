"""
Setup configuration for AGG-PBM package.
"""
from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="agg-pbm",
    version="0.1.0",
    author="Research Team",
    description="Aggregation efficiency closures for Population Balance Modeling",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    python_requires=">=3.10",
    install_requires=[
        "tensorflow>=2.16.0",
        "numpy>=1.26.0",
        "matplotlib>=3.8.0,<4.0.0",
        "tqdm>=4.66.0,<5.0.0",
        "PyYAML>=6.0.0,<7.0.0",
    ],
    extras_require={
        "dev": ["pytest>=7.0.0", "pytest-cov>=4.0.0"],
    },
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Science/Research",
        "Topic :: Scientific/Engineering :: Physics",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
)
