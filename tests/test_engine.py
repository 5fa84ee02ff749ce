"""Tests for the save-time validation engine."""

from datetime import datetime

import pytest

from supermodel.errors import SchemaValidationError
from supermodel.hooks import PersistContext, SaveMethod, SaveOptions
from supermodel.schema import (
    Field,
    Schema,
    ValidationMode,
    augment_schema,
    resolve_mode,
    validate_attributes,
    validate_pending,
)


@pytest.fixture
def schema():
    return Schema.from_shape({
        "firstName": Field("string", required=True, choices=("hello", "goodbye", "yo")),
        "lastName": Field("string", nullable=True),
        "nickname": Field("string", default="buddy"),
    })


class TestResolveMode:
    def test_new_record_is_full(self):
        assert resolve_mode(True, SaveOptions()) is ValidationMode.FULL

    def test_existing_record_is_partial(self):
        assert resolve_mode(False, SaveOptions()) is ValidationMode.PARTIAL

    def test_patch_overrides_newness(self):
        assert resolve_mode(True, SaveOptions(patch=True)) is ValidationMode.PARTIAL

    def test_update_method_overrides_newness(self):
        options = SaveOptions.build(method="update")
        assert resolve_mode(True, options) is ValidationMode.PARTIAL

    def test_insert_method_keeps_full(self):
        options = SaveOptions.build(method=SaveMethod.INSERT)
        assert resolve_mode(True, options) is ValidationMode.FULL


class TestAugmentSchema:
    def test_adds_bookkeeping_fields(self, schema):
        augmented = augment_schema(
            schema,
            timestamps=("createdAt", "updatedAt"),
            digest_column="passwordDigest",
        )
        assert augmented.fields["id"].nullable
        assert augmented.fields["createdAt"].type == "datetime"
        assert augmented.fields["passwordDigest"].type == "string"
        assert not any(augmented.fields[n].required for n in ("id", "createdAt", "passwordDigest"))

    def test_declared_fields_win(self):
        declared = Schema.from_shape({"id": Field("integer", required=True)})
        augmented = augment_schema(declared)
        assert augmented.fields["id"].type == "integer"

    def test_no_digest_without_secure_password(self, schema):
        assert "passwordDigest" not in augment_schema(schema)


class TestValidateAttributes:
    def test_full_returns_input_plus_defaults(self, schema):
        current = {"firstName": "hello", "lastName": None}
        value = validate_attributes(schema, ValidationMode.FULL, current, current)
        assert value == {"firstName": "hello", "lastName": None, "nickname": "buddy"}

    def test_full_enforces_required(self, schema):
        with pytest.raises(SchemaValidationError) as exc:
            validate_attributes(schema, ValidationMode.FULL, {}, {"lastName": "x"}, "crud_table")
        assert exc.value.fields == ["firstName"]
        assert exc.value.table_name == "crud_table"

    def test_partial_accepts_subset(self, schema):
        value = validate_attributes(
            schema, ValidationMode.PARTIAL, {"lastName": "world"}, {"lastName": "world"}
        )
        assert value == {"lastName": "world"}

    def test_partial_does_not_apply_defaults(self, schema):
        value = validate_attributes(schema, ValidationMode.PARTIAL, {"firstName": "yo"}, {})
        assert "nickname" not in value

    def test_partial_still_checks_supplied_fields(self, schema):
        with pytest.raises(SchemaValidationError) as exc:
            validate_attributes(schema, ValidationMode.PARTIAL, {"firstName": "nope"}, {})
        assert exc.value.errors[0].code == "INVALID_OPTION"

    def test_partial_rejects_unknown_fields(self, schema):
        with pytest.raises(SchemaValidationError):
            validate_attributes(schema, ValidationMode.PARTIAL, {"bogus": 1}, {})


class TestValidatePending:
    @pytest.mark.asyncio
    async def test_rewrites_payload_and_pending(self, Specimen):
        model = Specimen({"firstName": "hello"})
        context = PersistContext(
            model=model,
            method=SaveMethod.INSERT,
            options=SaveOptions(),
            is_new=True,
            attributes={"firstName": "hello", "createdAt": "2024-01-02T03:04:05"},
            pending={"firstName": "hello", "createdAt": "2024-01-02T03:04:05"},
        )
        await validate_pending(context)
        assert context.attributes["createdAt"] == datetime(2024, 1, 2, 3, 4, 5)
        assert context.pending["createdAt"] == datetime(2024, 1, 2, 3, 4, 5)

    @pytest.mark.asyncio
    async def test_skipped_without_schema(self, Base):
        class Plain(Base):
            table_name = "crud_table"

        context = PersistContext(
            model=Plain(),
            method=SaveMethod.INSERT,
            options=SaveOptions(),
            is_new=True,
            attributes={"anything": 1},
            pending={"anything": 1},
        )
        assert await validate_pending(context) is None
        assert context.attributes == {"anything": 1}


class TestModelValidateSave:
    def test_validates_own_attributes(self, Specimen):
        model = Specimen({"id": 1, "firstName": "hello"})
        assert model.validate_save()["firstName"] == "hello"

    def test_new_model_gets_defaults(self, Base):
        class Defaults(Base):
            table_name = "crud_table"
            validate = {"firstName": Field("string", default="yo")}

        model = Defaults()
        assert model.validate_save() == {"firstName": "yo"}
        assert model.get("firstName") == "yo"

    def test_mutable_default_not_shared_between_models(self, Base):
        class Thing(Base):
            table_name = "crud_table"
            validate = {"lastName": Field("any", default=[])}

        first, second = Thing(), Thing()
        first.validate_save()
        second.validate_save()
        first.get("lastName").append("x")
        assert second.get("lastName") == []
        assert Thing.schema.fields["lastName"].default == []

    def test_error_carries_table_name(self, Specimen):
        model = Specimen({"id": 1, "firstName": "hello"})
        model.set("firstName", 1)
        with pytest.raises(SchemaValidationError) as exc:
            model.validate_save()
        assert exc.value.table_name == "crud_table"
        assert model.get("firstName") == 1

    def test_patch_validates_payload_only(self, Specimen):
        model = Specimen()
        assert model.validate_save({"lastName": "world"}, patch=True) == {"lastName": "world"}
