"""Configuration package.

Provides the environment ConfigLoader plus its store and schema validators.
"""
from .config_loader import ConfigLoader, DEFAULT_ENV  # noqa: F401
from .env_store import EnvironmentStore  # noqa: F401
from .errors import EnviroConfigError, EnvironmentValidationError  # noqa: F401
from .schema import (  # noqa: F401
    PydanticSchema,
    RuleSchema,
    SchemaValidator,
    ValidationResult,
    ValidationRule,
    as_validator,
    load_rule_schema,
)
