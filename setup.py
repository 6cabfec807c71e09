"""Setup configuration for Grayban Discord Bot."""

from setuptools import setup, find_packages

setup(
    name="grayban",
    version="3.5.0",
    description="A Discord bot that enforces report and person blocklists",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    python_requires=">=3.11",
    install_requires=[
        "py-cord>=2.5",
        "aiosqlite>=0.19",
        "aiohttp>=3.9",
        "python-dotenv>=1.0",
        "PyYAML>=6.0",
        "prompt_toolkit>=3.0",
    ],
    extras_require={
        "test": [
            "pytest>=8.0,<9",
            "pytest-asyncio>=0.23",
        ],
    },
    entry_points={
        "console_scripts": [
            "grayban=grayban.main:main",
        ],
    },
)
