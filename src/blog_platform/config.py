"""
# Configuration Management Module

Configuration for the Blog Platform, built on **Pydantic Settings**.

## Loading Hierarchy

Higher layers override lower layers:

1. Environment variables (highest priority)
2. File named by `BLOG_PLATFORM_CONFIG_PATH`
3. `.blog` file in the project root
4. `.env` file in the project root
5. Defaults declared on `Settings` (lowest priority)

If no configuration file is found the application runs in environment-only mode.

## Secrets

`SECRET_KEY` signs session tokens and is a `SecretStr`; it is rejected at startup when empty or
when it still holds a placeholder value. `MONGODB_URL` must not be empty.

## Usage

```python
from blog_platform.config import settings

page_size = settings.BLOGS_PAGE_SIZE
secret = settings.SECRET_KEY.get_secret_value()
```
"""

import os
from pathlib import Path
from typing import Any, List, Optional

from dotenv import load_dotenv
from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# --- Constants ---
BLOG_FILENAME: str = ".blog"
DEFAULT_ENV_FILENAME: str = ".env"
CONFIG_ENV_VAR: str = "BLOG_PLATFORM_CONFIG_PATH"
PROJECT_ROOT: Path = Path(__file__).resolve().parent.parent.parent


# --- Config file discovery (no logging) ---
def get_config_path() -> Optional[str]:
    """
    Determines the configuration file path based on a predefined precedence order.

    1.  **Environment Variable**: `BLOG_PLATFORM_CONFIG_PATH` (if set and file exists).
    2.  **Blog Config**: `.blog` file in the project root directory.
    3.  **Dotenv Config**: `.env` file in the project root directory.
    4.  **Fallback**: `None`, which triggers environment-variable-only mode.

    Returns:
        Optional[str]: The absolute path to the configuration file, or `None` if not found.
    """
    env_path: Optional[str] = os.environ.get(CONFIG_ENV_VAR)
    if env_path and os.path.exists(env_path):
        return env_path
    blog_path: Path = PROJECT_ROOT / BLOG_FILENAME
    if blog_path.exists():
        return str(blog_path)
    env_path_file: Path = PROJECT_ROOT / DEFAULT_ENV_FILENAME
    if env_path_file.exists():
        return str(env_path_file)
    return None


CONFIG_PATH: Optional[str] = get_config_path()
if CONFIG_PATH:
    load_dotenv(dotenv_path=CONFIG_PATH, override=True)


class Settings(BaseSettings):
    """
    Application configuration settings model.

    **Configuration Groups:**
    *   **Server**: Host, port, debug mode, CORS origins.
    *   **Database**: MongoDB connection details and collection names.
    *   **Session tokens**: Signing key, algorithm, optional expiry.
    *   **Google sign-in**: Firebase service account credentials.
    *   **Uploads**: S3 bucket and credentials for pre-signed banner/image uploads.
    *   **Discovery**: Page sizes and result caps.
    """

    model_config = SettingsConfigDict(
        env_file=CONFIG_PATH if CONFIG_PATH else None,
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="allow",
    )

    # Server configuration
    HOST: str = "127.0.0.1"
    PORT: int = 3000
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: str = "*"

    # Session token configuration
    SECRET_KEY: SecretStr = SecretStr("")  # Must be set in .blog or environment
    ALGORITHM: str = "HS256"
    # 0 issues tokens without an exp claim
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7

    # MongoDB configuration
    MONGODB_URL: str = ""  # Must be set in .blog or environment
    MONGODB_DATABASE: str = "blog_platform"
    MONGODB_CONNECTION_TIMEOUT: int = 10000
    MONGODB_SERVER_SELECTION_TIMEOUT: int = 5000
    MONGODB_USERNAME: Optional[str] = None
    MONGODB_PASSWORD: Optional[SecretStr] = None

    USERS_COLLECTION: str = "users"
    BLOGS_COLLECTION: str = "blogs"

    # Google sign-in (Firebase Admin)
    FIREBASE_CREDENTIALS_PATH: Optional[str] = None

    # Upload URL signing (S3)
    AWS_REGION: str = "us-east-2"
    AWS_ACCESS_KEY_ID: Optional[str] = None
    AWS_SECRET_ACCESS_KEY: Optional[SecretStr] = None
    UPLOAD_BUCKET: str = "blog-platform-uploads"
    UPLOAD_URL_EXPIRES_SECONDS: int = 1000

    # Discovery
    BLOGS_PAGE_SIZE: int = 5
    TRENDING_LIMIT: int = 5
    USER_SEARCH_LIMIT: int = 50

    @field_validator("SECRET_KEY", mode="before")
    @classmethod
    def no_hardcoded_secrets(cls, v: Any, info: Any) -> Any:
        """
        Validates that the signing secret is not empty or a placeholder.

        Raises:
            ValueError: If the value is empty, hardcoded, or insecure.
        """
        if not v or "change" in str(v).lower() or "0000" in str(v) or not str(v).strip():
            raise ValueError(f"{info.field_name} must be set via environment or .blog and not hardcoded!")
        return v

    @field_validator("MONGODB_URL", mode="before")
    @classmethod
    def no_empty_urls(cls, v: Any, info: Any) -> Any:
        """
        Validates that the MongoDB URL is not empty.

        Raises:
            ValueError: If the URL is empty or whitespace.
        """
        if not v or not str(v).strip():
            raise ValueError(f"{info.field_name} must be set via environment or .blog and not empty!")
        return v

    @field_validator("BLOGS_PAGE_SIZE", "TRENDING_LIMIT", "USER_SEARCH_LIMIT", mode="before")
    @classmethod
    def validate_positive_integers(cls, v: Any, info: Any) -> int:
        """
        Validates that numeric settings are positive integers.

        Raises:
            ValueError: If the value is not a positive integer.
        """
        value = int(v)
        if value <= 0:
            raise ValueError(f"{info.field_name} must be a positive integer")
        return value

    @property
    def is_production(self) -> bool:
        """`True` when running with `DEBUG=False`."""
        return not self.DEBUG

    @property
    def cors_origins_list(self) -> List[str]:
        """Comma separated `CORS_ORIGINS` split into a list."""
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]


# Global settings instance
settings: Settings = Settings()
