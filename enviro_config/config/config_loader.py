#!/usr/bin/env python3
"""Environment ConfigLoader used at process start-up.

Runs a three step cycle every time it is constructed or switched:
- Load `<config_path>/.env.<env>` (dotenv syntax) and write every key into the
  environment store, overwriting whatever was there
- Fill in caller-supplied defaults for keys that are still unset or empty
- Validate the whole store against an optional schema, permitting unknown keys

If the environment file does not exist a warning is logged and the cycle
carries on with defaults only. A failed validation raises
`EnvironmentValidationError`; values already written stay in the store.
"""
from __future__ import annotations
import io
import os
import logging
from pathlib import Path
from typing import Any, Dict, Mapping, MutableMapping, Optional, Tuple, Union

from dotenv import dotenv_values

from .env_store import EnvironmentStore
from .errors import EnvironmentValidationError
from .schema import SchemaValidator, as_validator

logger = logging.getLogger(__name__)

DEFAULT_ENV = "development"

DefaultValue = Union[str, int, float, bool]


def _stringify(value: DefaultValue) -> str:
    # Booleans are written lowercase, the way shell-style env files spell them
    if isinstance(value, bool):
        return "true" if value else "false"
    # Integral floats drop the fraction: 1.0 is written as "1"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


class ConfigLoader:
    """Load an environment-specific dotenv file into the environment store."""
    def __init__(
        self,
        env: Optional[str] = None,
        schema: Any = None,
        defaults: Optional[Mapping[str, DefaultValue]] = None,
        config_path: Optional[str | os.PathLike[str]] = None,
        store: Optional[EnvironmentStore | MutableMapping[str, str]] = None,
    ):
        self.env = env or DEFAULT_ENV
        self.schema: Optional[SchemaValidator] = as_validator(schema)
        self.defaults: Dict[str, DefaultValue] = dict(defaults or {})
        self.config_path = Path(config_path) if config_path else Path.cwd()
        if isinstance(store, EnvironmentStore):
            self.store = store
        else:
            self.store = EnvironmentStore(store)

        self.loaded_keys: Tuple[str, ...] = ()
        self.applied_defaults: Tuple[str, ...] = ()
        self.reload()

    # ------------------------------------------------------------------
    @property
    def env_file(self) -> Path:
        return (self.config_path / f".env.{self.env}").resolve()

    # ------------------------------------------------------------------
    def reload(self) -> None:
        """Run the load, defaults and validation steps against the current settings."""
        self.loaded_keys = self._load_env_file()
        self.applied_defaults = self._apply_defaults()
        self._validate()

    # ------------------------------------------------------------------
    def _load_env_file(self) -> Tuple[str, ...]:
        env_file = self.env_file
        if not env_file.exists():
            logger.warning(f"Environment file .env.{self.env} not found")
            return ()

        content = env_file.read_text(encoding="utf-8")
        parsed = dotenv_values(stream=io.StringIO(content), interpolate=False)

        loaded = []
        for key, value in parsed.items():
            # `KEY` with no `=` parses to None and carries no value
            if value is None:
                continue
            self.store[key] = value
            loaded.append(key)

        logger.info(f"Loaded {len(loaded)} variables from {env_file}")
        return tuple(loaded)

    # ------------------------------------------------------------------
    def _apply_defaults(self) -> Tuple[str, ...]:
        applied = []
        for key, value in self.defaults.items():
            # Empty strings count as unset here
            if not self.store.is_set(key):
                self.store[key] = _stringify(value)
                applied.append(key)

        if applied:
            logger.debug(f"Applied defaults for: {applied}")
        return tuple(applied)

    # ------------------------------------------------------------------
    def _validate(self) -> None:
        if self.schema is None:
            return

        result = self.schema.validate(self.store.snapshot())
        if not result.ok:
            logger.error(f"Environment validation failed for '{self.env}' with {len(result.errors)} errors")
            for error in result.errors:
                logger.error(error)
            raise EnvironmentValidationError(result.message, result)

    # ------------------------------------------------------------------
    def switch_env(self, new_env: str) -> None:
        """Point the loader at `.env.<new_env>` and rerun the full cycle."""
        self.env = new_env
        self.reload()

    def set_config_path(self, new_path: str | os.PathLike[str]) -> None:
        """Point the loader at another directory and rerun the full cycle."""
        self.config_path = Path(new_path)
        self.reload()

    # ------------------------------------------------------------------
    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return self.store.get(key, default)

    def __repr__(self) -> str:
        return f"ConfigLoader(env={self.env!r}, config_path={str(self.config_path)!r}, schema={self.schema!r})"


__all__ = ["ConfigLoader", "DEFAULT_ENV"]
