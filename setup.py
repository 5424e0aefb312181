from setuptools import setup, find_packages

setup(
    name="winnow",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    py_modules=["winnow_run"],
    package_data={"winnow": ["grammar.lark"]},
    install_requires=[
        "lark",
        "pydantic>=2.0",
        "networkx>=3.0",
        "loguru>=0.7",
        "opentelemetry-api",
        "opentelemetry-sdk",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "winnow=winnow_run:main",
        ],
    },
    python_requires=">=3.10",
)
