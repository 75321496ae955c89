#!/usr/bin/env python3
"""
Setup script for the tableforge package

Installs the shared edit engine (shared) and the grid editor service (grid_editor)
from the backend/ source tree.
"""

from setuptools import setup, find_packages

setup(
    name="tableforge",
    version="0.1.0",
    package_dir={"": "backend"},
    packages=find_packages("backend", exclude=["tests", "tests.*", "*.tests", "*.tests.*"]),
    python_requires=">=3.9",
    install_requires=[
        # 🚀 Web Framework - MSA Core Stack
        "fastapi>=0.104.1",
        "uvicorn[standard]>=0.24.0",
        "httpx>=0.25.2",

        # 📋 Data Validation & Settings
        "pydantic>=2.5.0",
        "pydantic-settings>=2.1.0",
        "python-dotenv>=1.0.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.4.0",
            "pytest-asyncio>=0.21.0",
        ],
    },
    package_data={
        "shared": ["py.typed"],
    },
)
