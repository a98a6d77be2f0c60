from pathlib import Path

from setuptools import find_packages, setup

this_directory = Path(__file__).parent
long_description = (this_directory / "README.md").read_text(encoding="utf-8")

setup(
    name="stagecraft",
    version="0.1.0",
    description="Stage-tagged component store that exports workflows as standalone pipeline scripts.",
    long_description=long_description,
    long_description_content_type="text/markdown",
    include_package_data=True,
    packages=find_packages(include=["stagecraft", "stagecraft.*", "core", "core.*", "middleware", "schemas"]),
    py_modules=["config", "dependencies", "main"],
    install_requires=[
        "fastapi>=0.110.0",
        "uvicorn[standard]>=0.27.0",
        "pydantic>=2.0.0",
        "pydantic-settings>=2.0.0",
        "sqlalchemy[asyncio]>=2.0.0",
        "aiosqlite>=0.19.0",
        "rich>=13.0.0",
        # Generated pipeline scripts import these
        "pandas>=2.0.0",
        "numpy>=1.24.0",
        "scikit-learn>=1.4.0,<2.0.0",
    ],
    extras_require={
        "dev": ["pytest", "pytest-asyncio>=0.23.0", "httpx>=0.27.0"],
        "postgres": ["asyncpg>=0.29.0"],
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
