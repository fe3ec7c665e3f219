"""
Application configuration — paths and environment-driven settings.
"""

import os
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

# --- DYNAMIC PATH CONFIGURATION ---
# inventory_engine/config/__init__.py -> parent is config -> parent is inventory_engine -> parent is project root
BASE_DIR = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

# --- OUTPUT ---
OUTPUT_DIR = os.path.join(BASE_DIR, "output")
DOCUMENTS_DIR = os.path.join(OUTPUT_DIR, "documents")


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

    # Backend API
    API_BASE_URL: str = "http://localhost:5000/api"
    API_TOKEN: Optional[str] = None
    REQUEST_TIMEOUT: float = 15.0

    # Refresh intervals (seconds)
    REPORTS_POLL_SECONDS: float = 3.0
    LIST_POLL_SECONDS: float = 30.0

    # Report shape
    TREND_WINDOW_DAYS: int = 30
    TOP_PRODUCTS_LIMIT: int = 10

    # Documents
    CURRENCY: str = "PKR"
    COMPANY_NAME: str = "INVENTORY MANAGEMENT SYSTEM"
    COMPANY_ADDRESS: str = "123 Business Street, City, State 12345"
    COMPANY_CONTACT: str = "Phone: +1 (555) 123-4567 | Email: info@company.com"

    # Monitoring and Logging
    LOG_LEVEL: str = "INFO"


# Create settings instance
settings = Settings()
