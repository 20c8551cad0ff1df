"""
Catalog Search
Bilingual (Hebrew/English) product search and ranking for the storefront catalog.
"""

__version__ = "0.1.0"
