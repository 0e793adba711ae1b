from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal
from urllib.parse import urlparse

import yaml
from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .domain.models import AuthScheme
from .location.gazetteer import DEFAULT_GAZETTEER_PATH

PROJECT_ROOT = Path(__file__).resolve().parents[2]


class WeatherSettings(BaseModel):
    model_config = ConfigDict(extra="ignore")

    baseurl: str = "https://api.seniverse.com/v3"
    auth_scheme: AuthScheme = AuthScheme.PRIVATE_KEY
    default_day: int = Field(default=3, ge=0, le=31)
    timeout_seconds: float = Field(default=10.0, gt=0, le=60)

    @field_validator("baseurl")
    @classmethod
    def validate_baseurl(cls, value: str) -> str:
        text = value.strip()
        parsed = urlparse(text)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError("weather.baseurl must be an absolute http(s) URL")
        return text


class GazetteerSettings(BaseModel):
    model_config = ConfigDict(extra="ignore")

    path: Path | None = None

    @field_validator("path")
    @classmethod
    def validate_path(cls, value: Path | None) -> Path | None:
        if value is None:
            return None
        text = str(value).strip()
        if not text:
            raise ValueError("gazetteer.path must not be empty")
        return Path(text)


class RainbowYamlSettings(BaseModel):
    model_config = ConfigDict(extra="ignore")

    weather: WeatherSettings = Field(default_factory=WeatherSettings)
    gazetteer: GazetteerSettings = Field(default_factory=GazetteerSettings)


class EnvSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    rainbow_env: Literal["dev", "test", "prod"] = "dev"
    rainbow_config_path: Path = Path("config/rainbow.yaml")
    rainbow_private_key: SecretStr = SecretStr("")
    rainbow_public_key: str = ""


class AppSettings(BaseModel):
    env: EnvSettings
    yaml: RainbowYamlSettings
    project_root: Path
    config_path: Path
    gazetteer_path: Path

    @model_validator(mode="after")
    def validate_credentials(self) -> AppSettings:
        # The private key signs public-key requests and is the ``key`` param otherwise.
        if not self.env.rainbow_private_key.get_secret_value().strip():
            raise ValueError("RAINBOW_PRIVATE_KEY is required for both auth schemes")
        if self.yaml.weather.auth_scheme is AuthScheme.PUBLIC_KEY and not self.env.rainbow_public_key.strip():
            raise ValueError("RAINBOW_PUBLIC_KEY is required when weather.auth_scheme is 'public_key'")
        return self

    @property
    def private_key(self) -> str:
        return self.env.rainbow_private_key.get_secret_value().strip()

    @property
    def public_key(self) -> str:
        return self.env.rainbow_public_key.strip()


def _resolve_project_path(path: Path) -> Path:
    if path.is_absolute():
        return path
    return (PROJECT_ROOT / path).resolve()


def _load_yaml_settings(path: Path) -> RainbowYamlSettings:
    if not path.exists():
        return RainbowYamlSettings()

    raw_config = yaml.safe_load(path.read_text(encoding="utf-8"))
    if raw_config is None:
        raw_config = {}
    if not isinstance(raw_config, dict):
        raise ValueError("Rainbow config must be a YAML mapping/object at the top level")
    return RainbowYamlSettings.model_validate(raw_config)


def build_settings(env: EnvSettings) -> AppSettings:
    config_path = _resolve_project_path(env.rainbow_config_path)
    yaml_settings = _load_yaml_settings(config_path)
    gazetteer_path = (
        _resolve_project_path(yaml_settings.gazetteer.path)
        if yaml_settings.gazetteer.path is not None
        else DEFAULT_GAZETTEER_PATH
    )
    return AppSettings(
        env=env,
        yaml=yaml_settings,
        project_root=PROJECT_ROOT,
        config_path=config_path,
        gazetteer_path=gazetteer_path,
    )


@lru_cache(maxsize=1)
def load_settings() -> AppSettings:
    return build_settings(EnvSettings())
