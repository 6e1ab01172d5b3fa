"""
Setup script for zengo-engine.

Zengo is a spatial memory board game: the words of a sentence are laid out
on a square board, shown briefly, hidden, and then recalled by placing
stones on their cells in reading order.

The package provides the engine (content generation and validation, the
session state machine, telemetry, scoring, progression) and the 'zengo'
command for exercising it from the terminal.
"""

from setuptools import find_packages, setup

setup(
    name="zengo-engine",
    version="1.0.0",
    description="Spatial memory board engine: layouts, sessions, telemetry and scoring",
    long_description=open("README.md", encoding="utf-8").read() if __import__("os").path.exists("README.md") else "",
    long_description_content_type="text/markdown",
    author="Zengo",
    packages=find_packages(include=["zengo", "zengo.*"]),
    python_requires=">=3.11",
    install_requires=[
        # CLI
        "typer>=0.9.0",
        "rich>=13.0.0",
        # Config & Validation
        "pydantic>=2.0.0",
        "pydantic-settings>=2.0.0",
        # Logging
        "loguru>=0.7.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
            "ruff>=0.1.0",
            "mypy>=1.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "zengo=zengo.cli.main:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "Intended Audience :: Developers",
        "Intended Audience :: Education",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Education",
        "Topic :: Games/Entertainment :: Puzzle Games",
    ],
    keywords="memory game spatial-memory education cognitive",
)
