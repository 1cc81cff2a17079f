"""
Настройки приложения каталога курсов.
"""

import os
from pathlib import Path
from typing import Dict, Literal, Optional, Union

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError

from .shared_kernel import ConfigurationError

# Соответствие полей настроек переменным окружения
ENV_VARS: Dict[str, str] = {
    "backend": "COURSE_CATALOG_BACKEND",
    "storage_path": "COURSE_CATALOG_STORAGE_PATH",
    "namespace": "COURSE_CATALOG_NAMESPACE",
    "api_base_url": "COURSE_CATALOG_API_URL",
    "api_timeout": "COURSE_CATALOG_API_TIMEOUT",
    "log_level": "COURSE_CATALOG_LOG_LEVEL",
}


class CatalogSettings(BaseModel):
    """Настройки каталога курсов."""

    backend: Literal["local", "remote"] = "local"
    storage_path: Path = Path("course_catalog_data.json")
    namespace: str = Field("course_catalog", min_length=1)
    api_base_url: str = "http://localhost:8000/api"
    api_timeout: float = Field(10.0, gt=0)
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    @classmethod
    def from_env(
        cls, env_file: Optional[Union[str, Path]] = None
    ) -> "CatalogSettings":
        """Читает настройки из окружения и .env-файла.

        Raises:
            ConfigurationError: если значение переменной некорректно
        """
        load_dotenv(dotenv_path=env_file)
        values = {
            field: os.environ[var] for field, var in ENV_VARS.items() if var in os.environ
        }
        if "log_level" in values:
            values["log_level"] = values["log_level"].upper()
        try:
            return cls(**values)
        except ValidationError as e:
            raise ConfigurationError(f"Некорректные настройки каталога: {e}") from e
