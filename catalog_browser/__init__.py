"""Catalog Browser.

Search, filter, sort and page through a remote product catalog while
keeping the visible list, pagination metadata and the shareable address
in agreement.
"""

__version__ = "0.1.0"
