"""
Catalog package for the Author & Book Catalog service.

This package contains:
- Storage documents and partial-update structs
- MongoDB data access for authors and books
- Input validation
- Author statistics engine
- Book search, filter, sort and pagination engine
"""

__version__ = "1.0.0"
