"""Unit tests for tool descriptors and argument validation"""
import pytest

from mcp_chat.tool_registry import ToolDescriptor, ToolRegistry, parse_tool_arguments, validate_arguments


def test_descriptor_to_openai(color_tool):
    spec = color_tool.to_openai()
    assert spec["type"] == "function"
    assert spec["function"]["name"] == "get-colors-for-mood"
    assert spec["function"]["description"] == "Gets colors for a mood"
    assert spec["function"]["parameters"]["required"] == ["mood"]


def test_descriptor_without_schema_gets_empty_object():
    spec = ToolDescriptor("ping").to_openai()
    assert spec["function"]["parameters"] == {"type": "object", "properties": {}}


def test_validation_fills_defaults(color_tool):
    result = validate_arguments(color_tool, {"mood": "happy"})
    assert result.ok
    assert result.arguments == {"mood": "happy", "count": 1}


def test_validation_requires_mood(color_tool):
    result = validate_arguments(color_tool, {"count": 2})
    assert not result.ok
    assert "mood" in result.error


@pytest.mark.parametrize(
    "args,fragment",
    [
        ({"mood": 3}, "'mood' must be string"),
        ({"mood": "sad", "count": "two"}, "'count' must be integer"),
        ({"mood": "sad", "count": True}, "'count' must be integer"),
        ({"mood": "sad", "count": 1.5}, "'count' must be integer"),
        ({"mood": "sad", "count": 0}, "'count' must be >= 1"),
    ],
)
def test_validation_rejects_bad_values(color_tool, args, fragment):
    result = validate_arguments(color_tool, args)
    assert not result.ok
    assert result.error == fragment


def test_validation_accepts_integral_float(color_tool):
    result = validate_arguments(color_tool, {"mood": "sad", "count": 2.0})
    assert result.ok
    assert result.arguments["count"] == 2
    assert isinstance(result.arguments["count"], int)


def test_validation_maximum():
    tool = ToolDescriptor(
        "pick",
        input_schema={"type": "object", "properties": {"n": {"type": "integer", "maximum": 2}}},
    )
    assert validate_arguments(tool, {"n": 2}).ok
    assert validate_arguments(tool, {"n": 3}).error == "'n' must be <= 2"


def test_validation_unknown_keys_only_rejected_when_closed(color_tool):
    assert validate_arguments(color_tool, {"mood": "sad", "extra": 1}).ok
    closed = ToolDescriptor(
        color_tool.name,
        input_schema={**color_tool.input_schema, "additionalProperties": False},
    )
    result = validate_arguments(closed, {"mood": "sad", "extra": 1})
    assert not result.ok
    assert "extra" in result.error


def test_registry_lookup(color_tool):
    registry = ToolRegistry([color_tool])
    assert registry.get("get-colors-for-mood") is color_tool
    assert registry.get("delete-everything") is None
    assert registry.names == ["get-colors-for-mood"]
    assert len(registry.to_openai()) == 1
    unknown = registry.validate("delete-everything", {})
    assert not unknown.ok
    assert "not available" in unknown.error


def test_parse_tool_arguments():
    assert parse_tool_arguments('{"mood": "happy", "count": 2}') == {"mood": "happy", "count": 2}
    assert parse_tool_arguments("") == {}
    assert parse_tool_arguments(None) == {}
    with pytest.raises(ValueError):
        parse_tool_arguments("[1]")
    with pytest.raises(ValueError):
        parse_tool_arguments("{mood: happy")


NULLABLE_TOOL = ToolDescriptor(
    "describe-mood",
    input_schema={
        "type": "object",
        "properties": {
            "mood": {"type": ["string", "null"]},
            "count": {"type": ["integer", "null"], "minimum": 1},
        },
        "required": ["mood"],
    },
)


@pytest.mark.parametrize("mood", ["happy", None])
def test_validation_accepts_any_listed_type(mood):
    result = validate_arguments(NULLABLE_TOOL, {"mood": mood, "count": None})
    assert result.ok
    assert result.arguments == {"mood": mood, "count": None}


def test_validation_rejects_value_outside_listed_types():
    result = validate_arguments(NULLABLE_TOOL, {"mood": 7})
    assert not result.ok
    assert result.error == "'mood' must be string or null"
    assert validate_arguments(NULLABLE_TOOL, {"mood": "x", "count": 0}).error == "'count' must be >= 1"


def test_validation_ignores_unrecognised_type_values():
    tool = ToolDescriptor("odd", input_schema={"properties": {"a": {"type": {"weird": True}}, "b": {"type": "uuid"}}})
    assert validate_arguments(tool, {"a": 1, "b": 2}).ok
