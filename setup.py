"""Setup script for formula-deps."""

from setuptools import setup, find_packages

setup(
    name="formula-deps",
    version="0.1.0",
    description="Trace formula precedents and dependents across a hierarchical document",
    author="formula-deps developers",
    python_requires=">=3.10",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    install_requires=[
        "flask>=3.0.0",
        "flask-cors>=4.0.0",
        "networkx>=3.2.1",
        "pyyaml>=6.0.1",
        "click>=8.1.7",
        "rich>=13.7.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.4.4",
        ]
    },
    entry_points={
        "console_scripts": [
            "formula-deps=formula_deps.cli:cli",
        ]
    },
)
