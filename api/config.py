"""
API configuration settings.
"""

from pydantic_settings import BaseSettings


class APIConfig(BaseSettings):
    """API configuration settings."""

    # API Settings
    api_title: str = "Author & Book Catalog API"
    api_version: str = "1.0.0"
    api_description: str = """
    REST API for a catalog of authors and their books.

    ## Features

    * **Authors**: create, read, update and delete authors
    * **Books**: create, read, update and delete books owned by an author
    * **Statistics**: per-author page, genre and publication statistics
    * **Search**: filter books by title, genre and author name with sorting and pagination

    All errors are returned as `{"error": "<message>"}`.
    """

    # Server Settings
    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False

    # CORS Settings
    cors_origins: list = ["*"]  # Configure appropriately for production
    cors_allow_credentials: bool = True
    cors_allow_methods: list = ["GET", "POST", "PUT", "DELETE", "OPTIONS"]
    cors_allow_headers: list = ["*"]

    # Logging
    log_level: str = "INFO"

    model_config = {
        "env_file": ".env",
        "extra": "ignore"  # Ignore extra fields from .env
    }


# Global config instance
config = APIConfig()
