"""Tests for schema types, the field validator and YAML schema loading."""

from datetime import date, datetime

import pytest

from supermodel.core.types import UNSET, get_field_type
from supermodel.errors import ConfigurationError
from supermodel.schema import (
    Field,
    Schema,
    load_schema,
    relax,
    schema_from_dict,
    validate,
)


@pytest.fixture
def person_schema():
    return Schema.from_shape({
        "firstName": Field("string", required=True, choices=("hello", "goodbye", "yo")),
        "lastName": Field("string", nullable=True),
        "age": Field("integer", min=0, max=150),
        "role": Field("string", default="member"),
    })


# =============================================================================
# Field / Schema construction
# =============================================================================


class TestField:
    def test_unknown_type_rejected(self):
        with pytest.raises(ConfigurationError, match="Unknown field type"):
            Field("uuid")

    def test_choices_become_tuple(self):
        assert Field("string", choices=["a", "b"]).choices == ("a", "b")

    def test_invalid_pattern_rejected(self):
        with pytest.raises(ConfigurationError, match="Invalid pattern"):
            Field("string", pattern="[unclosed")

    def test_callable_default_resolved_per_call(self):
        field = Field("any", default=list)
        first = field.resolve_default()
        assert first == []
        assert field.resolve_default() is not first

    def test_mutable_default_copied_per_call(self):
        field = Field("any", default={"tags": []})
        first = field.resolve_default()
        first["tags"].append("x")
        assert field.resolve_default() == {"tags": []}
        assert field.default == {"tags": []}

    def test_no_default_is_unset(self):
        assert Field("string").default is UNSET
        assert not Field("string").has_default

    def test_from_dict_accepts_camel_case_options(self):
        field = Field.from_dict({"type": "string", "minLength": 2, "allowEmpty": True, "oneOf": ["x"]})
        assert field.min_length == 2
        assert field.allow_empty
        assert field.choices == ("x",)

    def test_from_dict_rejects_unknown_option(self):
        with pytest.raises(ConfigurationError, match="Unknown field option 'unique'"):
            Field.from_dict({"type": "string", "unique": True})


class TestSchema:
    def test_from_shape_accepts_field_dicts_and_type_names(self):
        schema = Schema.from_shape({
            "a": Field("string"),
            "b": {"type": "integer", "required": True},
            "c": "boolean",
        })
        assert schema.fields["b"].required
        assert schema.fields["c"].type == "boolean"

    def test_from_shape_reads_allow_unknown(self):
        schema = Schema.from_shape({"a": "string", "allowUnknown": True})
        assert schema.allow_unknown
        assert "allowUnknown" not in schema

    def test_from_shape_returns_schema_unchanged(self, person_schema):
        assert Schema.from_shape(person_schema) is person_schema

    def test_from_shape_rejects_non_mapping(self):
        with pytest.raises(ConfigurationError):
            Schema.from_shape(["firstName"])

    def test_fields_are_read_only(self, person_schema):
        with pytest.raises(TypeError):
            person_schema.fields["extra"] = Field()

    def test_with_fields_keeps_declared_fields(self, person_schema):
        extended = person_schema.with_fields({
            "firstName": Field("any"),
            "id": Field("any", nullable=True),
        })
        assert extended.fields["firstName"].type == "string"
        assert "id" in extended
        assert "id" not in person_schema


class TestRelax:
    def test_named_fields_become_optional(self, person_schema):
        relaxed = relax(person_schema, ["firstName"])
        assert not relaxed.fields["firstName"].required

    def test_original_schema_untouched(self, person_schema):
        relax(person_schema, ["firstName"])
        assert person_schema.fields["firstName"].required

    def test_constraints_survive(self, person_schema):
        relaxed = relax(person_schema, ["firstName"])
        assert relaxed.fields["firstName"].choices == ("hello", "goodbye", "yo")

    def test_undeclared_names_ignored(self, person_schema):
        assert relax(person_schema, ["nope"]) is person_schema


# =============================================================================
# validate()
# =============================================================================


class TestValidate:
    def test_valid_input_returns_input_plus_defaults(self, person_schema):
        result = validate(person_schema, {"firstName": "hello", "lastName": None})
        assert result.valid
        assert result.value == {"firstName": "hello", "lastName": None, "role": "member"}

    def test_defaults_skipped_when_disabled(self, person_schema):
        result = validate(person_schema, {"firstName": "yo"}, apply_defaults=False)
        assert "role" not in result.value

    def test_missing_required_field(self, person_schema):
        result = validate(person_schema, {})
        assert not result.valid
        assert [(e.field, e.code) for e in result.errors] == [("firstName", "REQUIRED")]

    def test_invalid_option(self, person_schema):
        result = validate(person_schema, {"firstName": "notanoption"}, table_name="crud_table")
        assert result.errors[0].code == "INVALID_OPTION"
        assert result.table_name == "crud_table"

    def test_unknown_field_rejected(self, person_schema):
        result = validate(person_schema, {"firstName": "hello", "nickname": "x"})
        assert result.errors[0].code == "UNKNOWN_FIELD"
        assert result.errors[0].field == "nickname"

    def test_unknown_field_kept_when_allowed(self):
        schema = Schema.from_shape({"a": "string", "allowUnknown": True})
        result = validate(schema, {"a": "x", "b": 1})
        assert result.valid
        assert result.value == {"a": "x", "b": 1}

    def test_null_rejected_unless_nullable(self, person_schema):
        result = validate(person_schema, {"firstName": None})
        assert result.errors[0].code == "NOT_NULLABLE"

    def test_wrong_type(self, person_schema):
        result = validate(person_schema, {"firstName": 1})
        assert result.errors[0].code == "INVALID_STRING"

    def test_integer_coercion(self, person_schema):
        result = validate(person_schema, {"firstName": "yo", "age": "42"})
        assert result.value["age"] == 42

    def test_numeric_bounds(self, person_schema):
        result = validate(person_schema, {"firstName": "yo", "age": 151})
        assert result.errors[0].code == "MAX_VALUE"

    def test_empty_string_rejected_by_default(self):
        schema = Schema.from_shape({"a": "string"})
        assert validate(schema, {"a": ""}).errors[0].code == "EMPTY"

    def test_empty_string_allowed(self):
        schema = Schema.from_shape({"a": Field("string", allow_empty=True)})
        assert validate(schema, {"a": ""}).valid

    def test_empty_string_accepted_by_any(self):
        schema = Schema.from_shape({"a": "any"})
        result = validate(schema, {"a": ""})
        assert result.valid
        assert result.value == {"a": ""}

    def test_validations_get_separate_default_objects(self):
        schema = Schema.from_shape({"tags": Field("any", default=[])})
        first = validate(schema, {}).value
        second = validate(schema, {}).value
        first["tags"].append("x")
        assert second["tags"] == []
        assert first["tags"] is not second["tags"]

    def test_length_and_pattern(self):
        schema = Schema.from_shape({
            "code": Field("string", min_length=3, max_length=5, pattern=r"[A-Z]+"),
        })
        assert validate(schema, {"code": "AB"}).errors[0].code == "MIN_LENGTH"
        assert validate(schema, {"code": "ABCDEF"}).errors[0].code == "MAX_LENGTH"
        assert validate(schema, {"code": "abc"}).errors[0].code == "PATTERN_MISMATCH"
        assert validate(schema, {"code": "ABC"}).valid

    def test_all_errors_collected(self, person_schema):
        result = validate(person_schema, {"age": -1, "nickname": "x"})
        codes = {e.code for e in result.errors}
        assert codes == {"UNKNOWN_FIELD", "REQUIRED", "MIN_VALUE"}

    def test_input_not_mutated(self, person_schema):
        attributes = {"firstName": "hello"}
        validate(person_schema, attributes)
        assert attributes == {"firstName": "hello"}


class TestFieldTypes:
    def test_boolean_rejected_as_integer(self):
        with pytest.raises(TypeError):
            get_field_type("integer").coerce(True)

    def test_boolean_from_string(self):
        assert get_field_type("boolean").coerce("false") is False

    def test_datetime_from_iso_string(self):
        assert get_field_type("datetime").coerce("2024-01-02T03:04:05") == datetime(2024, 1, 2, 3, 4, 5)

    def test_date_from_datetime(self):
        assert get_field_type("date").coerce(datetime(2024, 1, 2, 3, 4)) == date(2024, 1, 2)


# =============================================================================
# YAML loader
# =============================================================================


class TestLoadSchema:
    def test_loads_yaml_file(self, tmp_path):
        path = tmp_path / "specimen.yaml"
        path.write_text(
            "fields:\n"
            "  firstName:\n"
            "    type: string\n"
            "    required: true\n"
            "    choices: [hello, goodbye, yo]\n"
            "  lastName:\n"
            "    type: string\n"
            "    nullable: true\n"
        )
        schema = load_schema(path)
        assert schema.fields["firstName"].choices == ("hello", "goodbye", "yo")
        assert schema.fields["lastName"].nullable

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="not found"):
            load_schema(tmp_path / "missing.yaml")

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("fields: [unclosed\n")
        with pytest.raises(ConfigurationError, match="Invalid YAML"):
            load_schema(path)

    def test_fields_key_required(self):
        with pytest.raises(ConfigurationError, match="'fields'"):
            schema_from_dict({"firstName": {"type": "string"}})

    def test_allow_unknown(self):
        schema = schema_from_dict({"fields": {"a": "string"}, "allowUnknown": True})
        assert schema.allow_unknown
