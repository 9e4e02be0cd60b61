# setup.py
from setuptools import setup, find_packages

setup(
    name="bank_scraper",
    version="0.1.0",
    description="Asynchronous content scraper for the Standard Bank Mozambique website",
    packages=find_packages(exclude=("tests", "tests.*")),
    install_requires=[
        "aiohttp>=3.9",
        "beautifulsoup4>=4.12",
        "click>=8.1",
        "langdetect>=1.0.9",
        "pdfplumber>=0.10",
        "playwright>=1.40",
        "pydantic>=2.5",
        "PyYAML>=6.0",
        "soupsieve>=2.5",
    ],
    extras_require={
        "test": [
            "pytest>=7.4",
            "pytest-asyncio>=0.23",
        ],
    },
    entry_points={
        "console_scripts": [
            "bank-scraper=bank_scraper.cli:cli",
        ],
    },
    python_requires=">=3.11",
)
