from __future__ import annotations

import json
import logging
import os
import tomllib
from pathlib import Path
from typing import Any, Mapping

import yaml

from .config import AppConfig
from .errors import ConfigError

LOGGER = logging.getLogger(__name__)

CONFIG_NAME = "backup.config"
SEARCH_SUFFIXES = (".yaml", ".yml", ".json", ".toml", "")
ENV_BOUND_KEYS = ("restic", "rclone")


class ConfigLoader:
    def __init__(
        self,
        search_dir: Path,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        self._search_dir = search_dir
        self._environ = os.environ if environ is None else environ

    @property
    def default_candidates(self) -> list[Path]:
        return [self._search_dir / f"{CONFIG_NAME}{suffix}" for suffix in SEARCH_SUFFIXES]

    def load(self, config_path: str | None = None) -> AppConfig:
        LOGGER.info("Start reading config file")
        config_file = self._resolve(config_path)
        data = self._read(config_file)
        data = self._apply_environment(data)
        config = AppConfig.from_dict(data, source=config_file)
        LOGGER.info("Using config file: %s", config_file)
        return config

    def _resolve(self, config_path: str | None) -> Path:
        if config_path:
            config_file = Path(config_path).expanduser()
            if not config_file.is_file():
                raise ConfigError(f"Config file not found: {config_file}")
            return config_file

        for candidate in self.default_candidates:
            if candidate.is_file():
                return candidate

        searched = ", ".join(path.name for path in self.default_candidates)
        raise ConfigError(
            f"No config file found in {self._search_dir} (looked for {searched})"
        )

    def _read(self, config_file: Path) -> dict[str, Any]:
        suffix = config_file.suffix.lower()
        try:
            text = config_file.read_text(encoding="utf-8")
        except OSError as exc:
            raise ConfigError(f"Could not read config file {config_file}: {exc}") from exc

        try:
            if suffix in (".yaml", ".yml") or config_file.name == CONFIG_NAME:
                payload = yaml.safe_load(text)
            elif suffix == ".json":
                payload = json.loads(text) if text.strip() else None
            elif suffix == ".toml":
                payload = tomllib.loads(text)
            else:
                raise ConfigError(f'Unsupported config type "{suffix}": {config_file}')
        except (yaml.YAMLError, json.JSONDecodeError, tomllib.TOMLDecodeError) as exc:
            raise ConfigError(f"Could not parse config file {config_file}: {exc}") from exc

        if payload is None:
            return {}
        if not isinstance(payload, dict):
            raise ConfigError(f"Config file {config_file} must contain a mapping")
        return payload

    def _apply_environment(self, data: dict[str, Any]) -> dict[str, Any]:
        merged = dict(data)
        for key in ENV_BOUND_KEYS:
            raw = self._environ.get(key.upper())
            # Empty variables are treated as unset.
            if not raw or not raw.strip():
                continue
            try:
                merged[key] = yaml.safe_load(raw)
            except yaml.YAMLError as exc:
                raise ConfigError(
                    f"Could not parse environment variable {key.upper()}: {exc}"
                ) from exc
            LOGGER.info("Section %s overridden from environment", key)
        return merged
