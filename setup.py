"""
dashfs setup.py — Package configuration and CLI entry point.
"""

from setuptools import find_packages, setup

setup(
    name="dashfs",
    version="1.0.0",
    description="dashfs — hash-addressed dashboard folder tree with a deduplicating content store",
    packages=find_packages(include=["dashfs", "dashfs.*"]),
    python_requires=">=3.11",
    entry_points={
        "console_scripts": [
            "dashfs=dashfs.cli:main",
        ],
    },
    install_requires=[
        "sqlalchemy>=2.0",
        "psycopg2-binary>=2.9",
        "pydantic>=2.5",
        "redis>=5.0",
        "pyyaml>=6.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.4",
        ],
    },
)
