"""
Setup script for qa-curator.

QA Curator turns unstructured source text into curated question-answer
datasets using a large language model. It serves two roles:

1. Curation API - backend for the browser-based curation UI
2. Curation CLI - one-shot dataset generation from the terminal

Either a cloud backend (Gemini) or a locally hosted model server
(Ollama-compatible) can generate the pairs.
"""

from setuptools import find_packages, setup

setup(
    name="qa-curator",
    version="1.0.0",
    description="LLM-driven question-answer dataset curation with resilient output recovery",
    long_description=open("README.md", encoding="utf-8").read() if __import__("os").path.exists("README.md") else "",
    long_description_content_type="text/markdown",
    author="QA Curator",
    packages=find_packages(include=["qa_curator", "qa_curator.*"]),
    py_modules=["config"],
    python_requires=">=3.10",
    install_requires=[
        # CLI
        "typer>=0.9.0",
        "rich>=13.0.0",
        # API
        "fastapi>=0.100.0",
        "uvicorn>=0.23.0",
        # Config & Validation
        "pydantic>=2.0.0",
        "pydantic-settings>=2.0.0",
        # HTTP
        "httpx>=0.25.0",
        # Logging
        "loguru>=0.7.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-asyncio>=0.21.0",
            "pytest-cov>=4.0.0",
            "ruff>=0.1.0",
            "mypy>=1.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "qa-curator=qa_curator.cli.main:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "Environment :: Web Environment",
        "Intended Audience :: Developers",
        "Intended Audience :: Science/Research",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Scientific/Engineering :: Artificial Intelligence",
    ],
    keywords="llm dataset curation question-answer gemini ollama",
)
