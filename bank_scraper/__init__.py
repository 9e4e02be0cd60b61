# bank_scraper/__init__.py
"""
BankScraper package initializer.
Defines the package version; the CLI lives in :mod:`bank_scraper.cli`.
"""
__version__ = "0.1.0"
