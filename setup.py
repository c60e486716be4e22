"""
Setup configuration for Todo Manager package
"""

from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="todo-manager",
    version="1.0.0",
    author="Your Name",
    author_email="your.email@example.com",
    description="Todo list state layer with local, remote and Redis persistence and automatic fallback",
    long_description=long_description,
    long_description_content_type="text/markdown",
    url="https://github.com/yourusername/todo-manager",
    packages=find_packages(exclude=["tests", "tests.*"]),
    py_modules=["start_server"],
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Topic :: Software Development :: Libraries",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
    ],
    python_requires=">=3.9",
    install_requires=[
        "python-dotenv>=1.0",
        "httpx>=0.24",
        "redis>=4.5",
        "fastapi>=0.100",
        "pydantic>=2.0",
        "uvicorn>=0.22",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0",
            "pytest-cov>=4.0",
            "black>=23.0",
            "flake8>=6.0",
            "mypy>=1.0",
        ],
    },
)
