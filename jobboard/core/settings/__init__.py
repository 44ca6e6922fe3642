import os
from typing import Union

from .base import BaseSettings
from .development import DevelopmentSettings
from .production import ProductionSettings
from .testing import TestingSettings


def get_settings() -> Union[DevelopmentSettings, ProductionSettings, TestingSettings]:
    """
    Factory function to get the appropriate settings instance.

    Returns:
        Settings instance based on ENVIRONMENT variable:
        - If ENVIRONMENT=production: Loads secrets from .env file
        - If ENVIRONMENT=testing: SQLite and short cache timeouts
        - Otherwise: Local development defaults
    """
    environment = os.getenv("ENVIRONMENT", "development").lower()

    if environment == "production":
        return ProductionSettings()
    if environment == "testing":
        return TestingSettings()
    return DevelopmentSettings()


# Global settings instance
settings = get_settings()

# Export for easy imports
__all__ = ["settings", "get_settings", "BaseSettings"]
