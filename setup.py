"""setuptools setup for MouseCheck.

Install for development:
    pip install -e ".[test]"
    pytest
"""

from setuptools import setup, find_packages

setup(
    name="MouseCheck",
    version="0.1.0",
    description="Timed allow/prohibit click monitor",
    packages=find_packages(include=["mousecheck", "mousecheck.*"]),
    python_requires=">=3.10",
    install_requires=[
        "PyQt6",
        "SQLAlchemy>=2.0",
        "numpy",
    ],
    extras_require={
        "test": ["pytest"],
    },
)
