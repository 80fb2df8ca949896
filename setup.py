"""Packaging for timerkit.

Install for development:
    pip install -e ".[test]"
    pytest
"""

from setuptools import setup, find_packages

setup(
    name="timerkit",
    version="0.1.0",
    description="Drift-free timer sessions and progress polling for Qt controls",
    packages=find_packages(include=["timerkit", "timerkit.*"]),
    install_requires=[
        "PyQt6",
        "SQLAlchemy>=2.0",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "timerkit=timerkit.__main__:main",
        ],
    },
    python_requires=">=3.10",
)
