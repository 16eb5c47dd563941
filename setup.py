"""
Setup script for recruiter-import project.

Allows development installation with `pip install -e .`
"""

from setuptools import setup, find_packages

setup(
    name="recruiter-import",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.11",
    install_requires=[
        "fastapi>=0.110",
        "uvicorn>=0.27",
        "pydantic>=2.0",
        "pydantic-settings>=2.0",
        "pymongo>=4.6",
        "requests>=2.31",
        "python-dotenv>=1.0",
    ],
    extras_require={
        "test": [
            "pytest>=8.0",
            "pytest-mock>=3.12",
            "pytest-asyncio>=0.23",
            "httpx>=0.27",
        ],
    },
)
