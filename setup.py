# setup.py
from setuptools import setup, find_packages

setup(
    name="sqlwrap",
    version="0.1.0",
    description="Lazy-connecting DB-API wrapper with parameter binding and result-shaping helpers",
    packages=find_packages(
        exclude=(
            "tests",
            "tests.*",
            "docs",
            "build",
            "dist",
        )
    ),
    install_requires=[
        "psycopg2-binary>=2.8",
    ],
    extras_require={
        "test": ["pytest>=7"],
    },
    python_requires=">=3.10",
)
