#!/usr/bin/env python3
"""Setup script for the ink decompiler."""
from setuptools import setup, find_packages
from pathlib import Path

# Read README
readme = Path(__file__).parent / "README.md"
long_description = readme.read_text() if readme.exists() else ""

setup(
    name="pyinkdec",
    version="0.1.0",
    description="Reconstructs ink interactive-fiction script from compiled story JSON",
    long_description=long_description,
    long_description_content_type="text/markdown",
    author="pyinkdec Contributors",
    license="GPL-3.0-or-later",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    python_requires=">=3.8",
    entry_points={
        'console_scripts': [
            'pyinkdec=ink_decomp.main:main',
        ],
    },
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: GNU General Public License v3 or later (GPLv3+)",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Topic :: Software Development :: Disassemblers",
        "Topic :: Games/Entertainment",
    ],
)
