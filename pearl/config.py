"""
Configuration management for pearl.

Loads server and BigQuery settings from a YAML file. The file path defaults to
config.yaml and can be overridden with PEARL_CONFIG (including from .env).
"""

import os

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError

# Load .env file from project root
load_dotenv()

CONFIG_PATH = os.getenv("PEARL_CONFIG", "config.yaml")
DEFAULT_PORT = 8080


class ServerConfig(BaseModel):
    """HTTP server settings."""

    model_config = {"extra": "forbid"}

    port: int = Field(DEFAULT_PORT, ge=1, le=65535, description="Port to listen on")


class BigQueryConfig(BaseModel):
    """Location of the journeys table."""

    model_config = {"extra": "forbid"}

    project_id: str = Field("", description="Google Cloud project ID")
    dataset: str = Field("", description="Dataset holding the journeys table")


class Config(BaseModel):
    """All application configuration."""

    model_config = {"extra": "forbid"}

    server: ServerConfig = Field(default_factory=ServerConfig)
    bigquery: BigQueryConfig = Field(default_factory=BigQueryConfig)


def _format_errors(error: ValidationError) -> str:
    """Flatten pydantic errors into "section.field: message" pairs."""
    return "; ".join(
        f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
        for err in error.errors()
    )


def load_config(path: str | os.PathLike = CONFIG_PATH) -> Config:
    """
    Read and validate a YAML config file.

    Args:
        path: Path to the config file

    Returns:
        Config with defaults applied (server.port falls back to 8080)

    Raises:
        ValueError: If the file is missing or unreadable, unparsable, has
            unknown or mistyped fields, or lacks required BigQuery settings
    """
    try:
        with open(path, encoding="utf-8") as f:
            raw = yaml.safe_load(f)
    except FileNotFoundError:
        raise ValueError(f"Config file not found: {path}")
    except OSError as e:
        raise ValueError(f"Reading config file {path}: {e}")
    except yaml.YAMLError as e:
        raise ValueError(f"Parsing config file {path}: {e}")

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ValueError(f"Config file {path} must contain a mapping")

    # An empty section ("server:") means "use the defaults"
    raw = {key: value for key, value in raw.items() if value is not None}

    try:
        config = Config.model_validate(raw)
    except ValidationError as e:
        raise ValueError(f"Invalid config file {path}: {_format_errors(e)}")

    validate_config(config)
    return config


def validate_config(config: Config):
    """Validate that required configuration is present."""
    missing = []

    if not config.bigquery.project_id:
        missing.append("bigquery.project_id")

    if not config.bigquery.dataset:
        missing.append("bigquery.dataset")

    if missing:
        raise ValueError(
            f"Missing required configuration: {', '.join(missing)}\n"
            "Please copy config.example.yaml to config.yaml and fill in your values."
        )
