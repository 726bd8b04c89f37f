"""
Setup script for enviro_config package.
"""

from setuptools import setup, find_packages

setup(
    name="enviro_config",
    version="1.0.0",
    description="Environment-specific .env loading with defaults and schema validation",
    author="enviro_config Team",
    packages=find_packages(include=["enviro_config", "enviro_config.*"]),
    python_requires=">=3.8",
    install_requires=[
        # Core dependencies
        "python-dotenv>=1.0.0",
        "PyYAML>=6.0",
        
        # Schema validation
        "pydantic>=2.0.0",
        
        # Utilities
        "click>=8.1.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.4.0",
            "pytest-cov>=4.1.0",
            "black>=23.0.0",
            "flake8>=6.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "enviro-config=enviro_config.cli:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
    ],
)
