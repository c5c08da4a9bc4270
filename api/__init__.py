"""
FastAPI REST API for the Author & Book Catalog.

This module provides a REST API for:
- Author management with per-author book listings
- Book management tied to an owning author
- Per-author statistics
- Book search with filtering, sorting and pagination
"""
