"""
Application configuration from environment variables.
"""

import os
from typing import Iterable, Optional

from dotenv import load_dotenv

# Load environment variables from .env file before reading them
load_dotenv()


class Config:
    """Application configuration from environment variables."""

    # Remote catalog (DAM/PIM) API
    CATALOG_API_URL: str = os.getenv('CATALOG_API_URL', '').rstrip('/')
    CATALOG_API_KEY: str = os.getenv('CATALOG_API_KEY', '')
    API_TIMEOUT: int = int(os.getenv('API_TIMEOUT', '30'))

    # Local store
    DATABASE_URL: str = os.getenv('DATABASE_URL', 'sqlite:///catalog_sync.db')

    # Synchronization
    SYNC_PAGE_SIZE: int = int(os.getenv('SYNC_PAGE_SIZE', '100'))
    ASSET_BUNDLE: str = os.getenv('ASSET_BUNDLE', 'acquia_dam_image_asset')

    # HTTP product endpoint
    API_TOKEN: str = os.getenv('API_TOKEN', '')

    # Logging
    LOG_LEVEL: str = os.getenv('LOG_LEVEL', 'INFO')
    LOG_FILE: str = os.getenv('LOG_FILE', '/tmp/catalog_sync.log')

    SYNC_REQUIRED = ('CATALOG_API_URL', 'CATALOG_API_KEY')
    WEB_REQUIRED = ('CATALOG_API_URL', 'CATALOG_API_KEY', 'API_TOKEN')

    @classmethod
    def validate(cls, required: Optional[Iterable[str]] = None) -> None:
        """
        Validate required configuration on startup.

        Args:
            required: Names of variables that must be set.
                      Defaults to the variables needed by the sync commands.

        Raises:
            ValueError: If required variables missing
        """
        if required is None:
            required = cls.SYNC_REQUIRED

        missing = [key for key in required if not getattr(cls, key)]

        if missing:
            raise ValueError(
                f"Missing required environment variables: {', '.join(missing)}"
            )
