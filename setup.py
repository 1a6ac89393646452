from setuptools import setup, find_namespace_packages

setup(
    name="sffvektor",
    version="0.1.0",
    python_requires=">=3.11",
    packages=find_namespace_packages(include=['cli*', 'core*', 'api*']),
    include_package_data=True,
    install_requires=[
        "Click",
        "SQLAlchemy>=2.0",
        "beautifulsoup4",
        "httpx",
        "pydantic>=2",
        "fastapi",
        "uvicorn",
    ],
    extras_require={
        "test": [
            "pytest",
        ],
    },
    entry_points={
        "console_scripts": [
            "sffvektor=cli.main:main",
        ],
    },
)
