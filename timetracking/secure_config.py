"""
Secure Configuration Management

Provides centralized, validated configuration for the time tracking pipeline.
Values come from environment variables (optionally loaded from a .env file)
and are validated on access with fail-fast behavior.

Usage:
    from timetracking.secure_config import get_config

    config = get_config()
    ado_config = config.get_ado_config()
    seven_pace_config = config.get_seven_pace_config()  # None when not configured

Environment:
    ADO_ORGANIZATION_URL        https://dev.azure.com/<org>
    ADO_PAT                     Azure DevOps Personal Access Token
    ADO_PROJECT                 Project that owns the teams and work items
    SEVENPACE_BASE_URL          7pace Timetracker REST base (https://<org>.timehub.7pace.com/api/rest)
    SEVENPACE_API_TOKEN         7pace API token
    TIMETRACKING_SETTINGS_FILE  Settings JSON holding member role exclusions

Raises:
    ConfigurationError: If configuration is missing or invalid
"""

import os
import re
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

DEFAULT_SETTINGS_FILE = "data/settings.json"

PLACEHOLDERS = ("your_pat", "your_token", "example", "placeholder", "xxx", "replace_me")


class ConfigurationError(Exception):
    """Raised when configuration is missing or invalid."""

    pass


@dataclass
class AzureDevOpsConfig:
    """
    Validated Azure DevOps configuration.
    """

    organization_url: str
    pat: str
    project: str | None = None

    def __post_init__(self) -> None:
        self._validate()

    def _validate(self) -> None:
        if not self.organization_url:
            raise ConfigurationError("ADO_ORGANIZATION_URL is required")

        if not self.organization_url.startswith("https://"):
            raise ConfigurationError(f"ADO_ORGANIZATION_URL must use HTTPS: {self.organization_url}")

        if not ("dev.azure.com" in self.organization_url or "visualstudio.com" in self.organization_url):
            raise ConfigurationError(
                f"ADO_ORGANIZATION_URL must be a valid Azure DevOps URL: {self.organization_url}"
            )

        if not self.pat:
            raise ConfigurationError("ADO_PAT is required")

        if len(self.pat) < 20:
            raise ConfigurationError(f"ADO_PAT appears invalid (too short: {len(self.pat)} chars, expected >=20)")

        if any(placeholder in self.pat.lower() for placeholder in PLACEHOLDERS):
            raise ConfigurationError("ADO_PAT contains a placeholder value - please set a real Personal Access Token")

        if not self.project:
            raise ConfigurationError("ADO_PROJECT is required")

        if not re.match(r"^[a-zA-Z0-9 _\-\.]+$", self.project):
            raise ConfigurationError(f"ADO_PROJECT contains invalid characters: {self.project}")


@dataclass
class SevenPaceConfig:
    """
    Validated 7pace Timetracker configuration.
    """

    base_url: str
    api_token: str

    def __post_init__(self) -> None:
        self._validate()

    def _validate(self) -> None:
        if not self.base_url:
            raise ConfigurationError("SEVENPACE_BASE_URL is required")

        if not self.base_url.startswith("https://"):
            raise ConfigurationError(f"SEVENPACE_BASE_URL must use HTTPS: {self.base_url}")

        if not self.api_token:
            raise ConfigurationError("SEVENPACE_API_TOKEN is required")

        if any(placeholder in self.api_token.lower() for placeholder in PLACEHOLDERS):
            raise ConfigurationError("SEVENPACE_API_TOKEN contains a placeholder value")


class SecureConfig:
    """
    Centralized secure configuration manager.

    Loads and validates all pipeline configuration from environment variables.
    """

    def __init__(self) -> None:
        """Initialize configuration (loads .env file)."""
        load_dotenv()

    def get_ado_config(self, project: str | None = None) -> AzureDevOpsConfig:
        """
        Get validated Azure DevOps configuration.

        Args:
            project: Optional project name (overrides ADO_PROJECT env var)

        Returns:
            AzureDevOpsConfig: Validated configuration

        Raises:
            ConfigurationError: If configuration is missing or invalid
        """
        return AzureDevOpsConfig(
            organization_url=os.getenv("ADO_ORGANIZATION_URL") or "",
            pat=os.getenv("ADO_PAT") or "",
            project=project or os.getenv("ADO_PROJECT"),
        )

    def get_seven_pace_config(self) -> SevenPaceConfig | None:
        """
        Get validated 7pace configuration.

        7pace is optional: when neither SEVENPACE_BASE_URL nor SEVENPACE_API_TOKEN
        is set the integration is treated as not configured.

        Returns:
            SevenPaceConfig, or None if the integration is not configured

        Raises:
            ConfigurationError: If only one of the values is set, or a value is invalid
        """
        base_url = os.getenv("SEVENPACE_BASE_URL") or ""
        api_token = os.getenv("SEVENPACE_API_TOKEN") or ""

        if not base_url and not api_token:
            return None

        return SevenPaceConfig(base_url=base_url, api_token=api_token)

    def get_settings_file(self) -> Path:
        """Path of the settings JSON that stores member role exclusions."""
        return Path(os.getenv("TIMETRACKING_SETTINGS_FILE") or DEFAULT_SETTINGS_FILE)


_config_instance: SecureConfig | None = None


def get_config() -> SecureConfig:
    """
    Get the global configuration instance (singleton pattern).

    Returns:
        SecureConfig: The configuration manager
    """
    global _config_instance
    if _config_instance is None:
        _config_instance = SecureConfig()
    return _config_instance


def validate_config_on_startup(required_services: list[str]) -> None:
    """
    Validate required configuration at application startup.

    Args:
        required_services: Services to validate ('ado', 'sevenpace')

    Raises:
        ConfigurationError: If any required configuration is missing or invalid
        ValueError: If a service name is unknown

    Example:
        if __name__ == '__main__':
            validate_config_on_startup(['ado'])
    """
    config = get_config()

    for service in required_services:
        if service == "ado":
            config.get_ado_config()
        elif service == "sevenpace":
            if config.get_seven_pace_config() is None:
                raise ConfigurationError("SEVENPACE_BASE_URL and SEVENPACE_API_TOKEN are required")
        else:
            raise ValueError(f"Unknown service: {service}")
