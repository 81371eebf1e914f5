from pydantic_settings import BaseSettings, SettingsConfigDict
from enum import Enum
from typing import List, Optional

class AppEnv(str, Enum):
    DEVELOPMENT = "development"
    PRODUCTION = "production"
    TESTING = "testing"

class Settings(BaseSettings):
    """
    Central Configuration Registry.
    Strictly typed and validated via Pydantic.

    Every value can be overridden from the environment or a local `.env` file.
    Paths are resolved against SOURCE_ROOT by `BuildLayout.from_settings`,
    never against the process working directory.
    """

    # --- Application Meta ---
    APP_NAME: str = "spa-bundle-builder"
    APP_ENV: AppEnv = AppEnv.DEVELOPMENT
    DEBUG: bool = False

    # --- Logging & Observability ---
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "console"
    OTEL_SERVICE_NAME: str = "spa-bundle-builder"

    # --- Source / Build Layout ---
    SOURCE_ROOT: str = "."
    BUILD_DIR: str = "build"
    DEPENDENCY_DIR: str = "node_modules"

    # Overrides the version read from package.json when set
    PROJECT_VERSION: Optional[str] = None

    # Missing inline targets abort the build unless this is disabled
    INLINE_STRICT: bool = True

    # --- External Tools ---
    INSTALL_COMMAND: List[str] = ["npm", "install"]
    LINT_COMMAND: List[str] = ["npx", "eslint"]
    BUILD_COMMAND: List[str] = ["npm", "run", "build"]

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

settings = Settings()
