"""
Purpose:
    - Loads a registry config file (TOML, [registry] table)
    - Validates it with pydantic and builds a RegistryConfig
"""

import tomllib
from pathlib import Path
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, ValidationError

from subregistry.config.configs import FailurePolicy, RegistryConfig
from subregistry.errors.errors import ConfigurationError


class RegistrySettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str = "registry"
    failure_policy: FailurePolicy = FailurePolicy.BEST_EFFORT
    thread_safe: bool = True

    def to_config(self) -> RegistryConfig:
        return RegistryConfig(
            name=self.name,
            failure_policy=self.failure_policy,
            thread_safe=self.thread_safe,
        )


def load_registry_config_from_mapping(data: Mapping[str, Any]) -> RegistryConfig:
    """
    Build a RegistryConfig from a parsed mapping. Accepts either the full document
    (with a "registry" table) or the table itself.
    """
    section = data.get("registry", data)
    if not isinstance(section, Mapping):
        raise ConfigurationError("[registry] must be a table", field="registry", value=section)
    try:
        settings = RegistrySettings.model_validate(dict(section))
    except ValidationError as e:
        first = e.errors()[0]
        loc = ".".join(str(p) for p in first.get("loc", ()))
        raise ConfigurationError(
            f"Invalid registry config: {first.get('msg')}",
            field=loc or None,
            value=first.get("input"),
            details={"errors": e.error_count()},
        ) from e
    return settings.to_config()


class ConfigLoader:
    """
    Config-loader; loading toml file.
    """

    def __init__(self, base_dir: str = ".") -> None:
        self._base_dir = base_dir

    def load(self, file_name: str) -> dict[str, Any]:
        path = Path(file_name)
        if not path.is_absolute():
            path = Path(self._base_dir) / file_name

        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with path.open("rb") as f:
            try:
                return tomllib.load(f)
            except tomllib.TOMLDecodeError as e:
                raise ConfigurationError(f"Config file is not valid TOML: {path}") from e

    def load_registry_config(self, file_name: str) -> RegistryConfig:
        return load_registry_config_from_mapping(self.load(file_name))
