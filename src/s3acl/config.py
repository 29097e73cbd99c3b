"""Configuration loading and Pydantic models for s3acl."""

from pathlib import Path
from typing import Any, Mapping

import yaml
from pydantic import BaseModel, Field, field_validator

from s3acl.errors import UnknownPolicy
from s3acl.models import CannedPolicy


class EndpointConfig(BaseModel):
    """S3-compatible endpoint and credential configuration."""

    url: str = "http://localhost:9000"
    region: str = "us-east-1"
    access_key: str = ""
    secret_key: str = ""
    addressing_style: str = "path"
    max_attempts: int = 3


class HarnessConfig(BaseModel):
    """Test harness configuration."""

    bucket_prefix: str = "acl-test-"
    known_deviations: list[CannedPolicy] = Field(default_factory=list)

    @field_validator("known_deviations", mode="before")
    @classmethod
    def _parse_policies(cls, value: Any) -> Any:
        """Accept any spelling ``CannedPolicy.parse`` understands."""
        if not isinstance(value, (list, tuple)):
            return value
        try:
            return [CannedPolicy.parse(name) for name in value]
        except UnknownPolicy as exc:
            raise ValueError(exc.message) from None


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    format: str = "text"


class S3AclConfig(BaseModel):
    """Top-level s3acl configuration."""

    endpoint: EndpointConfig = Field(default_factory=EndpointConfig)
    harness: HarnessConfig = Field(default_factory=HarnessConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def _parse_endpoint(data: dict[str, Any] | None) -> dict[str, Any]:
    """Parse the endpoint section from YAML data.

    Handles nested structure: endpoint.credentials.access_key -> access_key
    """
    if data is None:
        return {}
    result: dict[str, Any] = {
        "url": data.get("url", "http://localhost:9000"),
        "region": data.get("region", "us-east-1"),
        "addressing_style": data.get("addressing_style", "path"),
        "max_attempts": data.get("max_attempts", 3),
    }
    credentials = data.get("credentials")
    if isinstance(credentials, dict):
        result["access_key"] = credentials.get("access_key", "")
        result["secret_key"] = credentials.get("secret_key", "")
    return result


def _parse_harness(data: dict[str, Any] | None) -> dict[str, Any]:
    """Parse the harness section from YAML data."""
    if data is None:
        return {}
    return {
        "bucket_prefix": data.get("bucket_prefix", "acl-test-"),
        "known_deviations": data.get("known_deviations") or [],
    }


def _parse_logging(data: dict[str, Any] | None) -> dict[str, Any]:
    """Parse the logging section from YAML data."""
    if data is None:
        return {}
    return {
        "level": data.get("level", "INFO"),
        "format": data.get("format", "text"),
    }


def load_config(path: Path) -> S3AclConfig:
    """Load an S3AclConfig from a YAML file.

    Args:
        path: Path to the YAML configuration file.

    Returns:
        A fully populated S3AclConfig validated by Pydantic.

    Raises:
        FileNotFoundError: If the config file does not exist.
        yaml.YAMLError: If the file is not valid YAML.
    """
    with open(path, "r") as fh:
        raw: dict[str, Any] = yaml.safe_load(fh) or {}

    return S3AclConfig(
        endpoint=EndpointConfig(**_parse_endpoint(raw.get("endpoint"))),
        harness=HarnessConfig(**_parse_harness(raw.get("harness"))),
        logging=LoggingConfig(**_parse_logging(raw.get("logging"))),
    )


_ENV_OVERRIDES = {
    "S3ACL_ENDPOINT": "url",
    "S3ACL_ACCESS_KEY": "access_key",
    "S3ACL_SECRET_KEY": "secret_key",
    "S3ACL_REGION": "region",
}


def apply_env_overrides(config: S3AclConfig, environ: Mapping[str, str]) -> S3AclConfig:
    """Override endpoint settings from ``S3ACL_*`` environment variables.

    Args:
        config: The loaded configuration, updated in place.
        environ: The environment mapping (usually ``os.environ``).

    Returns:
        The same config object.
    """
    for variable, attr in _ENV_OVERRIDES.items():
        value = environ.get(variable)
        if value:
            setattr(config.endpoint, attr, value)
    return config
