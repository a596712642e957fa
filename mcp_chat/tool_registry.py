"""Tool descriptors and argument validation."""

from __future__ import annotations

from dataclasses import dataclass, field
import json
from typing import Any, Dict, Iterable, List, Optional, Tuple


_JSON_TYPES: Dict[str, Tuple[type, ...]] = {
    "string": (str,),
    "integer": (int,),
    "number": (int, float),
    "boolean": (bool,),
    "object": (dict,),
    "array": (list,),
}


@dataclass(frozen=True)
class ToolDescriptor:
    name: str
    description: str = ""
    input_schema: Dict[str, Any] = field(default_factory=dict)

    @property
    def properties(self) -> Dict[str, Dict[str, Any]]:
        props = self.input_schema.get("properties", {})
        return props if isinstance(props, dict) else {}

    @property
    def required(self) -> List[str]:
        required = self.input_schema.get("required", [])
        return list(required) if isinstance(required, list) else []

    def to_openai(self) -> Dict[str, Any]:
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.input_schema or {"type": "object", "properties": {}},
            },
        }


@dataclass(frozen=True)
class ValidationResult:
    ok: bool
    error: Optional[str] = None
    arguments: Dict[str, Any] = field(default_factory=dict)


class ToolRegistry:
    """Tools advertised by the connected server, fixed for the session."""

    def __init__(self, descriptors: Iterable[ToolDescriptor] = ()) -> None:
        self._tools: Dict[str, ToolDescriptor] = {}
        for descriptor in descriptors:
            self._tools[descriptor.name] = descriptor

    @property
    def names(self) -> List[str]:
        return list(self._tools)

    def get(self, name: str) -> Optional[ToolDescriptor]:
        return self._tools.get(name)

    def to_openai(self) -> List[Dict[str, Any]]:
        return [descriptor.to_openai() for descriptor in self._tools.values()]

    def validate(self, name: str, args: Dict[str, Any]) -> ValidationResult:
        descriptor = self.get(name)
        if descriptor is None:
            return ValidationResult(False, f"Tool '{name}' is not available")
        return validate_arguments(descriptor, args)


def parse_tool_arguments(raw: Optional[str]) -> Dict[str, Any]:
    """Decode a tool-call argument string into a dict.

    Raises ValueError when the string is not a JSON object.
    """
    if raw is None or not raw.strip():
        return {}
    parsed = json.loads(raw)
    if not isinstance(parsed, dict):
        raise ValueError("Tool arguments must be a JSON object")
    return parsed


def _matches_type(value: Any, schema_type: str) -> bool:
    if schema_type == "null":
        return value is None
    expected = _JSON_TYPES.get(schema_type)
    if expected is None:
        return True
    # bool is an int subclass but never a valid JSON integer/number.
    if isinstance(value, bool) and schema_type in {"integer", "number"}:
        return False
    if schema_type == "integer" and isinstance(value, float) and value.is_integer():
        return True
    return isinstance(value, expected)


def _expect_type(name: str, value: Any, schema_type: Any) -> Optional[str]:
    # "type" may be a single name or a list such as ["string", "null"].
    if isinstance(schema_type, str):
        allowed = [schema_type]
    elif isinstance(schema_type, list):
        allowed = [t for t in schema_type if isinstance(t, str)]
    else:
        return None
    if not allowed or any(_matches_type(value, t) for t in allowed):
        return None
    return f"'{name}' must be {' or '.join(allowed)}"


def _check_bounds(name: str, value: Any, spec: Dict[str, Any]) -> Optional[str]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    minimum = spec.get("minimum")
    if isinstance(minimum, (int, float)) and value < minimum:
        return f"'{name}' must be >= {minimum}"
    maximum = spec.get("maximum")
    if isinstance(maximum, (int, float)) and value > maximum:
        return f"'{name}' must be <= {maximum}"
    return None


def validate_arguments(descriptor: ToolDescriptor, args: Dict[str, Any]) -> ValidationResult:
    """Check ``args`` against the descriptor's schema and fill defaults."""
    properties = descriptor.properties
    resolved = dict(args)

    unknown = set(resolved) - set(properties)
    if unknown and descriptor.input_schema.get("additionalProperties") is False:
        return ValidationResult(False, f"Unknown keys for {descriptor.name}: {sorted(unknown)}")

    for key, spec in properties.items():
        if key not in resolved and isinstance(spec, dict) and "default" in spec:
            resolved[key] = spec["default"]

    missing = [key for key in descriptor.required if key not in resolved]
    if missing:
        return ValidationResult(False, f"{descriptor.name} requires {missing}")

    for key, value in resolved.items():
        spec = properties.get(key)
        if not isinstance(spec, dict):
            continue
        err = _expect_type(key, value, spec.get("type", ""))
        if err:
            return ValidationResult(False, err)
        if spec.get("type") == "integer" and isinstance(value, float):
            resolved[key] = int(value)
        err = _check_bounds(key, value, spec)
        if err:
            return ValidationResult(False, err)

    return ValidationResult(True, arguments=resolved)
