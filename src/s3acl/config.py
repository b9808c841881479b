"""Configuration loading and Pydantic models for s3acl."""

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field


class ClientConfig(BaseModel):
    """Endpoint, credential and transport configuration."""

    endpoint: str = "http://localhost:9000"
    region: str = "us-east-1"
    access_key: str = ""
    secret_key: str = ""
    session_token: str = ""
    timeout: float = 30.0
    verify_tls: bool = True


class LoggingConfig(BaseModel):
    """Log level and output format."""

    level: str = "INFO"
    format: str = "text"


class ObservabilityConfig(BaseModel):
    """Prometheus metrics toggle.

    Read by applications embedding the client, which call
    ``s3acl.metrics.init_metrics()`` and expose the default registry
    themselves. The s3acl command does not record metrics.
    """

    metrics: bool = False


class S3ACLConfig(BaseModel):
    """Top-level s3acl configuration."""

    client: ClientConfig = Field(default_factory=ClientConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)


def _parse_client(data: dict[str, Any] | None) -> dict[str, Any]:
    """Parse the client section from YAML data into a dict for Pydantic.

    Handles nested structure: client.credentials.access_key -> access_key, etc.
    Flat keys win over the nested credentials section.
    """
    if data is None:
        return {}

    result: dict[str, Any] = {}
    credentials = data.get("credentials")
    if isinstance(credentials, dict):
        for key in ("access_key", "secret_key", "session_token"):
            if key in credentials:
                result[key] = credentials[key]

    for key in (
        "endpoint",
        "region",
        "access_key",
        "secret_key",
        "session_token",
        "timeout",
        "verify_tls",
    ):
        if key in data:
            result[key] = data[key]
    return result


def _parse_logging(data: dict[str, Any] | None) -> dict[str, Any]:
    """Parse the logging section from YAML data."""
    if data is None:
        return {}
    return {
        "level": data.get("level", "INFO"),
        "format": data.get("format", "text"),
    }


def _parse_observability(data: dict[str, Any] | None) -> dict[str, Any]:
    """Parse the observability section from YAML data."""
    if data is None:
        return {}
    return {"metrics": data.get("metrics", False)}


def load_config(path: Path) -> S3ACLConfig:
    """Load an S3ACLConfig from a YAML file.

    Args:
        path: Path to the YAML configuration file.

    Returns:
        A fully populated S3ACLConfig validated by Pydantic.

    Raises:
        FileNotFoundError: If the config file does not exist.
        yaml.YAMLError: If the file is not valid YAML.
    """
    with open(path, "r") as fh:
        raw: dict[str, Any] = yaml.safe_load(fh) or {}

    return S3ACLConfig(
        client=ClientConfig(**_parse_client(raw.get("client"))),
        logging=LoggingConfig(**_parse_logging(raw.get("logging"))),
        observability=ObservabilityConfig(**_parse_observability(raw.get("observability"))),
    )
