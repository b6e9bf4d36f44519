"""Setup configuration for deprecation-sentinel package."""

from setuptools import setup, find_packages
from pathlib import Path

# Read the README file
readme_file = Path(__file__).parent / "README.md"
long_description = (
    readme_file.read_text(encoding="utf-8") if readme_file.exists() else ""
)

setup(
    name="deprecation-sentinel",
    version="1.0.0",
    description="Report calls to deprecated methods through environment-specific logging and error-tracking backends",
    long_description=long_description,
    long_description_content_type="text/markdown",
    author="Tony Sebion",
    url="https://github.com/tonysebion/deprecation-sentinel",
    packages=find_packages(exclude=["tests", "tests.*", "docs", "docs.*"]),
    python_requires=">=3.8",
    install_requires=[
        "httpx>=0.24.0",
        "python-dotenv>=1.0.0",
        "pyyaml>=6.0",
        "requests-toolbelt>=1.0.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
            "black>=22.0.0",
            "flake8>=5.0.0",
            "mypy>=0.990",
        ],
    },
    entry_points={
        "console_scripts": [
            "deprecations-doctor=deprecations.__main__:main",
        ],
    },
    classifiers=[
        "Development Status :: 5 - Production/Stable",
        "Intended Audience :: Developers",
        "Topic :: Software Development :: Libraries :: Python Modules",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Python :: 3.13",
    ],
    keywords="deprecation monitoring logging error-tracking decorators",
    project_urls={
        "Bug Reports": "https://github.com/tonysebion/deprecation-sentinel/issues",
        "Source": "https://github.com/tonysebion/deprecation-sentinel",
    },
)
