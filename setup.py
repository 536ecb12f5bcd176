from setuptools import setup, find_packages

setup(
    name="uncontrib",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "pyyaml",
        "pydantic",
        "pandas",
        "pdfplumber",
    ],
    extras_require={
        "test": [
            "pytest",
        ],
    },
    entry_points={
        "console_scripts": [
            "uncontrib=uncontrib.cli:main",
        ],
    },
)
