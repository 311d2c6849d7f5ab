# setup.py
from setuptools import setup, find_packages

setup(
    name="doc_mirror",
    version="0.1.0",
    description="Mirror documentation sites into local Markdown files",
    packages=find_packages(exclude=("tests", "tests.*")),
    install_requires=[
        "aiohttp>=3.9",
        "beautifulsoup4>=4.12",
        "click>=8.1",
        "markdownify>=0.11",
        "pydantic>=2.5",
        "PyYAML>=6.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.4",
            "pytest-asyncio>=0.23",
        ],
    },
    entry_points={
        "console_scripts": [
            "doc-mirror=doc_mirror.cli:cli",
        ],
    },
    python_requires=">=3.11",
)
