# setup.py
"""Setup script for the Workflow Initializer Compiler."""

from setuptools import setup, find_packages

setup(
    name="workflow-initializer-compiler",
    version="0.1.0",
    description="Compile workflow builder exports into Ruby initializer classes",
    packages=find_packages(include=["flowinit", "flowinit.*", "cli", "cli.*"]),
    include_package_data=True,
    install_requires=[
        "click>=8.0",
        "pyyaml>=6.0",
        "pydantic>=2.0",
        "pydantic-settings>=2.0",
        "jinja2>=3.0",
        "structlog>=23.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
        "dev": [
            "pytest>=7.0",
            "black>=23.0",
            "flake8>=6.0",
        ]
    },
    entry_points={
        "console_scripts": [
            "flowinit=cli.main:cli",
        ],
    },
    python_requires=">=3.8",
)
