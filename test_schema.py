"""
Test Schema Validators
======================

Rule-based, pydantic and callable validators over plain string mappings.
"""

import json
from typing import Optional

import pytest
from pydantic import BaseModel, ConfigDict, Field

from enviro_config import PydanticSchema, RuleSchema, ValidationResult, ValidationRule, as_validator, load_rule_schema
from enviro_config.config.schema import CallableSchema


class ServiceSettings(BaseModel):
    PORT: int
    DEBUG: bool = False
    DATABASE_URL: Optional[str] = None


def test_rule_schema_accepts_valid_environment():
    schema = RuleSchema.from_dict({
        "PORT": {"type": "int", "range": [1, 65535]},
        "LOG_LEVEL": {"choices": ["DEBUG", "INFO", "WARNING"]},
        "RELEASE": {"pattern": r"v\d+\.\d+"},
        "FEATURE_FLAG": "bool",
    })

    result = schema.validate({
        "PORT": "8080",
        "LOG_LEVEL": "INFO",
        "RELEASE": "v1.2",
        "FEATURE_FLAG": "yes",
        "SOMETHING_ELSE": "ignored",
    })

    assert result.ok
    assert result.message == ""


def test_rule_schema_collects_every_error():
    schema = RuleSchema.from_dict({
        "PORT": {"type": "int", "range": [1, 65535]},
        "LOG_LEVEL": {"choices": ["DEBUG", "INFO"]},
        "RELEASE": {"pattern": r"v\d+"},
        "SECRET": {},
    })

    result = schema.validate({"PORT": "70000", "LOG_LEVEL": "TRACE", "RELEASE": "1"})

    assert not result.ok
    assert result.errors == [
        "'PORT' must be between 1 and 65535 (value: 70000)",
        "'LOG_LEVEL' must be one of: DEBUG, INFO (value: TRACE)",
        "'RELEASE' must match pattern v\\d+ (value: 1)",
        "Required parameter 'SECRET' not found",
    ]
    assert result.message == "; ".join(result.errors)


def test_bad_type_reported_once():
    schema = RuleSchema.from_dict({"PORT": {"type": "int", "range": [1, 10], "choices": [1, 2]}})
    result = schema.validate({"PORT": "abc"})
    assert result.errors == ["'PORT' must be of type int (value: abc)"]


def test_missing_key_reported_once():
    schema = RuleSchema.from_dict({"PORT": {"type": "int", "range": [1, 10]}})
    result = schema.validate({})
    assert result.errors == ["Required parameter 'PORT' not found"]


def test_optional_key_may_be_missing():
    schema = RuleSchema.from_dict({"CACHE_TTL": {"type": "int", "required": False}})
    assert schema.validate({}).ok
    assert not schema.validate({"CACHE_TTL": "soon"}).ok


def test_custom_message_and_custom_rule():
    schema = RuleSchema([
        ValidationRule("WORKERS", "type", int),
        ValidationRule("WORKERS", "custom", lambda v: v % 2 == 0, "WORKERS must be even"),
    ])
    assert schema.validate({"WORKERS": "4"}).ok
    assert schema.validate({"WORKERS": "3"}).errors == ["WORKERS must be even (value: 3)"]


def test_unknown_rule_type_rejected():
    with pytest.raises(ValueError):
        ValidationRule("PORT", "between", (1, 2))
    with pytest.raises(ValueError):
        ValidationRule("PORT", "type", "decimal")


def test_load_rule_schema_from_yaml(tmp_path):
    path = tmp_path / "schema.yaml"
    path.write_text(
        "PORT:\n"
        "  type: int\n"
        "  range: [1024, 65535]\n"
        "NODE_ENV:\n"
        "  choices: [development, production]\n",
        encoding="utf-8",
    )

    schema = load_rule_schema(path)

    assert schema.validate({"PORT": "3000", "NODE_ENV": "production"}).ok
    assert not schema.validate({"PORT": "80", "NODE_ENV": "production"}).ok


def test_load_rule_schema_from_json(tmp_path):
    path = tmp_path / "schema.json"
    path.write_text(json.dumps({"PORT": "int"}), encoding="utf-8")
    assert load_rule_schema(path).validate({"PORT": "1"}).ok


def test_load_rule_schema_errors(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_rule_schema(tmp_path / "nope.yaml")

    ini = tmp_path / "schema.ini"
    ini.write_text("[PORT]\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_rule_schema(ini)

    listing = tmp_path / "list.yaml"
    listing.write_text("- PORT\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_rule_schema(listing)


def test_pydantic_schema_permits_unknown_keys():
    schema = PydanticSchema(ServiceSettings)
    assert schema.validate({"PORT": "8080", "DEBUG": "true", "PATH": "/usr/bin"}).ok


def test_pydantic_schema_reports_field_errors():
    result = PydanticSchema(ServiceSettings).validate({"PORT": "http", "DEBUG": "maybe"})
    assert len(result.errors) == 2
    assert result.errors[0].startswith("PORT: ")
    assert result.errors[1].startswith("DEBUG: ")


def test_pydantic_schema_requires_model_class():
    with pytest.raises(TypeError):
        PydanticSchema(dict)


def test_as_validator_dispatch():
    rule_schema = RuleSchema([])

    assert as_validator(None) is None
    assert as_validator(rule_schema) is rule_schema
    assert isinstance(as_validator(ServiceSettings), PydanticSchema)
    assert isinstance(as_validator({"PORT": "int"}), RuleSchema)
    assert isinstance(as_validator(lambda env: None), CallableSchema)
    with pytest.raises(TypeError):
        as_validator(42)


def test_callable_schema_outcomes():
    def needs_port(env):
        return None if "PORT" in env else "PORT is required"

    validator = as_validator(needs_port)
    assert validator.validate({"PORT": "1"}).ok
    assert validator.validate({}).errors == ["PORT is required"]

    assert as_validator(lambda env: False).validate({}).errors == ["<lambda> rejected the environment"]
    assert as_validator(lambda env: ["a", "b"]).validate({}).message == "a; b"
    assert as_validator(lambda env: ValidationResult(["x"])).validate({}).errors == ["x"]


def test_untyped_range_compares_numbers():
    schema = RuleSchema.from_dict({"PORT": {"range": [1, 65535]}})

    assert schema.validate({"PORT": "8080"}).ok
    assert schema.validate({"PORT": "70000"}).errors == ["'PORT' must be between 1 and 65535 (value: 70000)"]


def test_untyped_choices_compare_numbers():
    schema = RuleSchema.from_dict({"WORKERS": {"choices": [1, 2, 4]}, "RATIO": {"range": [0, 1.5]}})

    assert schema.validate({"WORKERS": "2", "RATIO": "0.75"}).ok
    assert schema.validate({"WORKERS": "3", "RATIO": "1"}).errors == ["'WORKERS' must be one of: 1, 2, 4 (value: 3)"]


def test_untyped_numeric_rule_reports_non_number_once():
    schema = RuleSchema.from_dict({"PORT": {"range": [1, 65535], "choices": [80, 443]}})
    assert schema.validate({"PORT": "http"}).errors == ["'PORT' must be between 1 and 65535 (value: http)"]


def test_pydantic_schema_with_forbid_and_alias():
    class AliasedSettings(BaseModel):
        model_config = ConfigDict(extra="forbid")
        port: int = Field(alias="APP_PORT")

    schema = PydanticSchema(AliasedSettings)

    assert schema.validate({"APP_PORT": "8080", "PATH": "/usr/bin", "port": "ignored"}).ok
    assert not schema.validate({"PATH": "/usr/bin"}).ok


def test_as_validator_wraps_model_instance():
    validator = as_validator(ServiceSettings(PORT=1))

    assert isinstance(validator, PydanticSchema)
    assert validator.model is ServiceSettings
    assert validator.validate({"PORT": "8080"}).ok
    assert not validator.validate({}).ok
