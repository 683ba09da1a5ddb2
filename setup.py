"""
nestgen - TypeORM / NestJS Source Generator
Install: pip install -e .
"""

from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as f:
    long_description = f.read()

setup(
    name="nestgen",
    version="0.1.0",
    author="Diegoproggramer",
    author_email="",
    description="Generate TypeORM models and NestJS CRUD layers from a schema file",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(include=["nestgen", "nestgen.*"]),
    package_data={"nestgen": ["templates/*.jinja2"]},
    include_package_data=True,
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Topic :: Software Development :: Code Generators",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
    python_requires=">=3.10",
    install_requires=[
        "pydantic>=2.0.0",
        "PyYAML>=6.0",
        "jinja2>=3.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0",
            "pytest-cov>=4.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "nestgen=nestgen.cli:cli_main",
        ],
    },
    keywords="typeorm, nestjs, typescript, generator, code-generator, crud",
)
