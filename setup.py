"""
Blueprintgen - Laravel API controller & Data object generator
Install: pip install -e .
"""

from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as f:
    long_description = f.read()

setup(
    name="blueprintgen",
    version="0.1.0",
    author="Diegoproggramer",
    author_email="",
    description="Generate Laravel API controllers and Spatie Data objects from Blueprint drafts",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(include=["blueprintgen", "blueprintgen.*"]),
    package_data={"blueprintgen": ["resources/*.stub"]},
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
    ],
    extras_require={
        "dev": [
            "pytest>=7.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "blueprintgen=blueprintgen.cli:cli_main",
        ],
    },
    keywords="laravel, blueprint, generator, spatie, scramble, code-generator",
)
