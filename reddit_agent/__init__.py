"""
Reddit Agent core package.

Provides Reddit id enumeration, bulk post discovery and product page
extraction for the Reddit Agent application.
"""

__version__ = "0.1.0"
