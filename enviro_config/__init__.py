"""
enviro_config
=============

Load `.env.<environment>` files into the environment, apply defaults and
validate the result against an optional schema.
"""

from .config import (
    ConfigLoader,
    EnvironmentStore,
    EnviroConfigError,
    EnvironmentValidationError,
    PydanticSchema,
    RuleSchema,
    SchemaValidator,
    ValidationResult,
    ValidationRule,
    as_validator,
    load_rule_schema,
)

__version__ = "1.0.0"

__all__ = [
    'ConfigLoader',
    'EnvironmentStore',
    'EnviroConfigError',
    'EnvironmentValidationError',
    'PydanticSchema',
    'RuleSchema',
    'SchemaValidator',
    'ValidationResult',
    'ValidationRule',
    'as_validator',
    'load_rule_schema',
]
