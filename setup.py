from pathlib import Path

from setuptools import find_packages, setup

this_directory = Path(__file__).parent
long_description = (this_directory / "README.md").read_text(encoding="utf-8")

setup(
    name="exotab-core",
    version="0.1.0",
    description="Profiling, cleaning, correlation and model training for tabular exploration.",
    long_description=long_description,
    long_description_content_type="text/markdown",
    include_package_data=True,
    packages=find_packages(include=["exotab", "exotab.*"]),
    install_requires=[
        "pandas>=2.0.0",
        "numpy>=1.24.0",
        "scikit-learn>=1.4.0,<2.0.0",
        "pydantic>=2.0.0",
        "pydantic-settings>=2.0.0",
        "scipy>=1.10.0",
        "imbalanced-learn>=0.13.0",
        "xgboost>=2.1.4",
        "httpx>=0.24.0",
    ],
    extras_require={
        "dev": ["pytest", "pytest-asyncio>=0.23", "twine", "build"],
    },
    python_requires=">=3.9",
    classifiers=[
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Operating System :: OS Independent",
    ],
)
