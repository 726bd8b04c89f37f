"""
Environment Schema Validation
=============================

Pluggable validators for the merged environment store:

1. ``PydanticSchema``: validate the environment with a pydantic model
2. ``RuleSchema``: declarative per-key rules (type, range, choice, pattern, custom),
   declared in Python or loaded from a YAML/JSON file
3. Any callable returning a ``ValidationResult``, an error string, or ``None``

Every validator permits keys it does not mention, since the environment
always carries far more variables than any schema cares about.
"""

import json
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional, Protocol, Union, runtime_checkable

import yaml
from pydantic import BaseModel, ValidationError

logger = logging.getLogger(__name__)


@dataclass
class ValidationResult:
    """Outcome of validating an environment mapping."""
    errors: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    @property
    def message(self) -> str:
        return "; ".join(self.errors)

    def __bool__(self) -> bool:
        return self.ok


@runtime_checkable
class SchemaValidator(Protocol):
    """Anything that can check a string-keyed mapping."""

    def validate(self, env: Mapping[str, str]) -> ValidationResult:
        ...


class PydanticSchema:
    """Validate the environment against a pydantic model.

    Only the model's declared fields (or their aliases) are passed in, so
    unknown environment variables never reach the model. String values are coerced
    by pydantic's lax mode, e.g. ``"8080"`` satisfies an ``int`` field.
    """

    def __init__(self, model: type):
        if not (isinstance(model, type) and issubclass(model, BaseModel)):
            raise TypeError(f"PydanticSchema expects a pydantic model class, got {model!r}")
        self.model = model

    def _declared_keys(self) -> List[str]:
        populate_by_name = self.model.model_config.get("populate_by_name", False)
        keys = []
        for name, info in self.model.model_fields.items():
            alias = info.validation_alias if isinstance(info.validation_alias, str) else info.alias
            if alias:
                keys.append(alias)
            if not alias or populate_by_name:
                keys.append(name)
        return keys

    def validate(self, env: Mapping[str, str]) -> ValidationResult:
        # extra="forbid" models must never see undeclared variables
        data = {key: env[key] for key in self._declared_keys() if key in env}
        try:
            self.model.model_validate(data)
        except ValidationError as e:
            errors = []
            for error in e.errors():
                location = ".".join(str(part) for part in error.get("loc", ())) or self.model.__name__
                errors.append(f"{location}: {error.get('msg')}")
            return ValidationResult(errors)
        return ValidationResult()

    def __repr__(self) -> str:
        return f"PydanticSchema({self.model.__name__})"


def _to_bool(value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in ("1", "true", "yes", "on"):
        return True
    if lowered in ("0", "false", "no", "off"):
        return False
    raise ValueError(f"not a boolean: {value!r}")


_TYPE_COERCERS: Dict[str, Callable[[str], Any]] = {
    "str": str,
    "int": int,
    "float": float,
    "bool": _to_bool,
}


def _infer_type(constraint: Any) -> Optional[str]:
    """Pick a coercion for untyped range/choice rules from their YAML or JSON values."""
    values = [v for v in constraint if v is not None]
    if not values:
        return None
    if all(isinstance(v, bool) for v in values):
        return "bool"
    if all(isinstance(v, (int, float)) and not isinstance(v, bool) for v in values):
        return "float" if any(isinstance(v, float) for v in values) else "int"
    return None


RULE_TYPES = ("type", "range", "choice", "pattern", "custom")


@dataclass
class ValidationRule:
    """Individual environment validation rule."""
    parameter: str
    rule_type: str  # "type", "range", "choice", "pattern", "custom"
    constraint: Any
    error_message: Optional[str] = None
    required: bool = True

    def __post_init__(self):
        if self.rule_type not in RULE_TYPES:
            raise ValueError(f"Unknown rule type '{self.rule_type}', expected one of {RULE_TYPES}")
        if self.rule_type == "type":
            name = self.constraint if isinstance(self.constraint, str) else getattr(self.constraint, "__name__", "")
            if name not in _TYPE_COERCERS:
                raise ValueError(f"Unsupported type constraint for '{self.parameter}': {self.constraint!r}")
            self.constraint = name

    def describe(self) -> str:
        if self.error_message:
            return self.error_message
        if self.rule_type == "type":
            return f"'{self.parameter}' must be of type {self.constraint}"
        if self.rule_type == "range":
            low, high = self.constraint
            return f"'{self.parameter}' must be between {low} and {high}"
        if self.rule_type == "choice":
            return f"'{self.parameter}' must be one of: {', '.join(str(c) for c in self.constraint)}"
        if self.rule_type == "pattern":
            return f"'{self.parameter}' must match pattern {self.constraint}"
        return f"'{self.parameter}' failed custom validation"


class RuleSchema:
    """Validate the environment against a list of ``ValidationRule`` objects.

    All rules are evaluated and every failure is reported, rather than
    stopping at the first one.
    """

    def __init__(self, rules: List[ValidationRule]):
        self.rules = list(rules)
        self._types = {r.parameter: r.constraint for r in self.rules if r.rule_type == "type"}
        self._explicit_types = set(self._types)
        for rule in self.rules:
            if rule.parameter in self._types or rule.rule_type not in ("range", "choice"):
                continue
            inferred = _infer_type(rule.constraint)
            if inferred:
                self._types[rule.parameter] = inferred

    @classmethod
    def from_dict(cls, declared: Mapping[str, Any]) -> "RuleSchema":
        """
        Build a schema from a declarative mapping.

        Args:
            declared: Mapping of variable name to either a type name (``"int"``) or a
                mapping with any of ``type``, ``required``, ``range``, ``choices``,
                ``pattern`` and ``message``

        Returns:
            RuleSchema with one rule per declared constraint
        """
        rules: List[ValidationRule] = []
        for key, options in declared.items():
            if isinstance(options, str):
                options = {"type": options}
            elif options is None:
                options = {}
            elif not isinstance(options, Mapping):
                raise ValueError(f"Schema entry for '{key}' must be a mapping or a type name")

            required = bool(options.get("required", True))
            message = options.get("message")
            added = 0
            if "type" in options:
                rules.append(ValidationRule(key, "type", options["type"], message, required))
                added += 1
            if "range" in options:
                low, high = options["range"]
                rules.append(ValidationRule(key, "range", (low, high), message, required))
                added += 1
            if "choices" in options:
                rules.append(ValidationRule(key, "choice", list(options["choices"]), message, required))
                added += 1
            if "pattern" in options:
                rules.append(ValidationRule(key, "pattern", options["pattern"], message, required))
                added += 1
            if not added:
                # bare presence check
                rules.append(ValidationRule(key, "type", "str", message, required))
        return cls(rules)

    def validate(self, env: Mapping[str, str]) -> ValidationResult:
        errors: List[str] = []
        reported_missing = set()
        reported_bad_value = set()

        for rule in self.rules:
            if rule.parameter not in env:
                if rule.required and rule.parameter not in reported_missing:
                    reported_missing.add(rule.parameter)
                    errors.append(f"Required parameter '{rule.parameter}' not found")
                continue

            raw = env[rule.parameter]
            try:
                value = self._coerce(rule.parameter, raw)
            except ValueError:
                # With an explicit type only that rule reports the bad conversion
                if rule.parameter in self._explicit_types:
                    if rule.rule_type == "type":
                        errors.append(f"{rule.describe()} (value: {raw})")
                elif rule.parameter not in reported_bad_value:
                    reported_bad_value.add(rule.parameter)
                    errors.append(f"{rule.describe()} (value: {raw})")
                continue

            try:
                is_valid = self._validate_parameter(value, rule)
            except Exception as e:
                errors.append(f"Validation failed for '{rule.parameter}': {e}")
                continue

            if not is_valid:
                errors.append(f"{rule.describe()} (value: {raw})")

        return ValidationResult(errors)

    def _coerce(self, key: str, raw: str) -> Any:
        type_name = self._types.get(key, "str")
        return _TYPE_COERCERS[type_name](raw)

    def _validate_parameter(self, value: Any, rule: ValidationRule) -> bool:
        if rule.rule_type == "range":
            min_val, max_val = rule.constraint
            if min_val is not None and value < min_val:
                return False
            if max_val is not None and value > max_val:
                return False
            return True

        elif rule.rule_type == "choice":
            return value in rule.constraint

        elif rule.rule_type == "pattern":
            return re.fullmatch(rule.constraint, str(value)) is not None

        elif rule.rule_type == "custom":
            if callable(rule.constraint):
                return bool(rule.constraint(value))
            return bool(rule.constraint)

        # "type" rules pass once coercion succeeded
        return True

    def __repr__(self) -> str:
        return f"RuleSchema({len(self.rules)} rules)"


class CallableSchema:
    """Adapt a plain function into a ``SchemaValidator``."""

    def __init__(self, func: Callable[[Mapping[str, str]], Any]):
        self.func = func

    def validate(self, env: Mapping[str, str]) -> ValidationResult:
        outcome = self.func(env)
        if isinstance(outcome, ValidationResult):
            return outcome
        if outcome is None or outcome is True:
            return ValidationResult()
        if outcome is False:
            name = getattr(self.func, "__name__", "validator")
            return ValidationResult([f"{name} rejected the environment"])
        if isinstance(outcome, str):
            return ValidationResult([outcome])
        return ValidationResult([str(item) for item in outcome])


def load_rule_schema(schema_path: Union[str, Path]) -> RuleSchema:
    """
    Load a rule schema from a YAML or JSON file.

    Args:
        schema_path: Path to the schema file

    Returns:
        RuleSchema built from the file contents
    """
    schema_path = Path(schema_path)

    if not schema_path.exists():
        raise FileNotFoundError(f"Schema file not found: {schema_path}")

    with open(schema_path, 'r', encoding='utf-8') as f:
        if schema_path.suffix.lower() in ['.yaml', '.yml']:
            declared = yaml.safe_load(f) or {}
        elif schema_path.suffix.lower() == '.json':
            declared = json.load(f)
        else:
            raise ValueError(f"Unsupported schema format: {schema_path.suffix}")

    if not isinstance(declared, dict):
        raise ValueError(f"Schema file {schema_path} must contain a mapping of variable names")

    schema = RuleSchema.from_dict(declared)
    logger.info(f"Loaded {len(schema.rules)} validation rules from {schema_path}")
    return schema


def as_validator(schema: Any) -> Optional[SchemaValidator]:
    """Turn whatever the caller passed as ``schema`` into a validator (or ``None``)."""
    if schema is None:
        return None
    if isinstance(schema, type) and issubclass(schema, BaseModel):
        return PydanticSchema(schema)
    if isinstance(schema, BaseModel):
        return PydanticSchema(type(schema))
    if isinstance(schema, Mapping):
        return RuleSchema.from_dict(schema)
    if not isinstance(schema, type) and isinstance(schema, SchemaValidator):
        return schema
    if callable(schema):
        return CallableSchema(schema)
    raise TypeError(f"Unsupported schema object: {schema!r}")


__all__ = [
    "ValidationResult",
    "SchemaValidator",
    "PydanticSchema",
    "ValidationRule",
    "RuleSchema",
    "CallableSchema",
    "load_rule_schema",
    "as_validator",
]
