"""Configuration models for Postdesk."""

from pydantic import BaseModel, Field, field_validator
from pathlib import Path
from typing import Literal, Optional


class StorageConfig(BaseModel):
    """Where the content type schema and the post store live."""

    schema_path: str = Field(
        ...,
        description="Path to the YAML file declaring content, field and block types"
    )

    store_path: str = Field(
        ...,
        description="Path to the JSON post store (created on first save)"
    )

    @field_validator('schema_path')
    @classmethod
    def validate_schema_path(cls, v: str) -> str:
        """Validate the schema file exists."""
        path = Path(v).expanduser()
        if not path.exists():
            raise ValueError(
                f"Schema file does not exist: {path}\n"
                f"Please create it or update config.yaml"
            )
        if not path.is_file():
            raise ValueError(
                f"Schema path is not a file: {path}\n"
                f"Please provide a valid YAML file"
            )
        return str(path)

    @field_validator('store_path')
    @classmethod
    def expand_store_path(cls, v: str) -> str:
        return str(Path(v).expanduser())

    model_config = {"frozen": True}


class LoggingConfig(BaseModel):
    """Configuration for structured logging."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Minimum level written to the log file"
    )

    log_file: Optional[str] = Field(
        default=None,
        description="JSON log file (default: ~/.cache/postdesk/logs/postdesk.log)"
    )

    @field_validator('level', mode='before')
    @classmethod
    def normalize_level(cls, v: str) -> str:
        return v.upper() if isinstance(v, str) else v

    model_config = {"frozen": True}


class Config(BaseModel):
    """Root configuration for Postdesk."""

    storage: StorageConfig = Field(..., description="Schema and store locations")
    logging: LoggingConfig = Field(default_factory=LoggingConfig, description="Logging settings")

    model_config = {"frozen": True}
