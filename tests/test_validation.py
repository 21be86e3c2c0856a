# ==============================================================================
# PAYLOAD VALIDATION TESTS
# ==============================================================================
# Tests for descriptor-driven create/update checks
# ==============================================================================

from datetime import datetime, timezone

import pytest

from healthfit.core.exceptions import ValidationError
from healthfit.entities.catalogue import ENTITY_FIELDS, build_registry
from healthfit.schemas.payloads import PayloadSchema, payload_model
from healthfit.services.validation import validate_payload

MISSING = object()

REQUIRED_FIELDS = [
    (entity, descriptor.name)
    for entity, fields in ENTITY_FIELDS.items()
    for descriptor in fields
    if descriptor.required
]


@pytest.fixture
def registry():
    return build_registry()


class TestRequiredFields:
    """Tests for required-field rules."""

    @pytest.mark.parametrize("entity,field", REQUIRED_FIELDS)
    @pytest.mark.parametrize("empty", [MISSING, None, "", "   "])
    def test_every_required_field(self, registry, sample_payloads, entity, field, empty):
        payload = dict(sample_payloads[entity])
        if empty is MISSING:
            del payload[field]
        else:
            payload[field] = empty

        with pytest.raises(ValidationError) as exc_info:
            validate_payload(registry.resolve(entity), payload)

        assert exc_info.value.field == field
        assert exc_info.value.message == f"{field} is required"
        assert list(exc_info.value.errors) == [field]

    def test_every_violation_collected(self, registry):
        with pytest.raises(ValidationError) as exc_info:
            validate_payload(registry.resolve("users"), {})

        assert set(exc_info.value.errors) == {"name", "email", "role", "status"}
        assert exc_info.value.message == "name is required"

    def test_optional_field_may_be_omitted(self, registry, sample_payloads):
        payload = dict(sample_payloads["activities"])
        del payload["notes"]

        cleaned = validate_payload(registry.resolve("activities"), payload)
        assert "notes" not in cleaned

    def test_optional_blank_dropped(self, registry, sample_payloads):
        payload = {**sample_payloads["activities"], "notes": ""}

        cleaned = validate_payload(registry.resolve("activities"), payload)
        assert "notes" not in cleaned

    def test_non_object_body(self, registry):
        with pytest.raises(ValidationError):
            validate_payload(registry.resolve("users"), ["not", "an", "object"])


class TestNumberFields:
    """Tests for number coercion and bounds."""

    @pytest.mark.parametrize("rating", [0, 6, -1, 5.5])
    def test_rating_out_of_bounds(self, registry, sample_payloads, rating):
        payload = {**sample_payloads["feedbacks"], "rating": rating}

        with pytest.raises(ValidationError) as exc_info:
            validate_payload(registry.resolve("feedbacks"), payload)

        assert exc_info.value.field == "rating"

    @pytest.mark.parametrize("rating", [1, 5, 3.5])
    def test_rating_within_bounds(self, registry, sample_payloads, rating):
        payload = {**sample_payloads["feedbacks"], "rating": rating}

        cleaned = validate_payload(registry.resolve("feedbacks"), payload)
        assert cleaned["rating"] == rating

    def test_bound_message(self, registry, sample_payloads):
        payload = {**sample_payloads["feedbacks"], "rating": 6}

        with pytest.raises(ValidationError) as exc_info:
            validate_payload(registry.resolve("feedbacks"), payload)

        assert exc_info.value.message == "rating must be at most 5"

    def test_numeric_string_accepted(self, registry, sample_payloads):
        payload = {**sample_payloads["products"], "price": "19.5", "stock": "3"}

        cleaned = validate_payload(registry.resolve("products"), payload)
        assert cleaned["price"] == 19.5
        assert cleaned["stock"] == 3

    @pytest.mark.parametrize("bad", ["lots", True, [1], {"n": 1}, float("nan")])
    def test_not_a_number(self, registry, sample_payloads, bad):
        payload = {**sample_payloads["products"], "stock": bad}

        with pytest.raises(ValidationError) as exc_info:
            validate_payload(registry.resolve("products"), payload)

        assert exc_info.value.field == "stock"


class TestDateAndTextFields:
    """Tests for date parsing and text coercion."""

    def test_date_only(self, registry, sample_payloads):
        cleaned = validate_payload(
            registry.resolve("goals"),
            {**sample_payloads["goals"], "deadline": "2025-06-30"},
        )
        assert cleaned["deadline"] == datetime(2025, 6, 30, tzinfo=timezone.utc)

    def test_datetime_with_offset(self, registry, sample_payloads):
        cleaned = validate_payload(
            registry.resolve("goals"),
            {**sample_payloads["goals"], "deadline": "2025-06-30T10:00:00+02:00"},
        )
        assert cleaned["deadline"] == datetime(2025, 6, 30, 8, tzinfo=timezone.utc)

    def test_datetime_zulu(self, registry, sample_payloads):
        cleaned = validate_payload(
            registry.resolve("goals"),
            {**sample_payloads["goals"], "deadline": "2025-06-30T08:00:00Z"},
        )
        assert cleaned["deadline"].tzinfo is not None

    @pytest.mark.parametrize("bad", [
        "2025-02-30",
        "tomorrow",
        20250630,
        "9999-12-31T23:00:00-05:00",
    ])
    def test_invalid_date(self, registry, sample_payloads, bad):
        with pytest.raises(ValidationError) as exc_info:
            validate_payload(
                registry.resolve("goals"),
                {**sample_payloads["goals"], "deadline": bad},
            )
        assert exc_info.value.field == "deadline"
        assert exc_info.value.message == "deadline must be a valid date"

    def test_number_cast_to_text(self, registry, sample_payloads):
        cleaned = validate_payload(
            registry.resolve("reports"),
            {**sample_payloads["reports"], "metrics": 42},
        )
        assert cleaned["metrics"] == "42"

    def test_structure_not_text(self, registry, sample_payloads):
        with pytest.raises(ValidationError):
            validate_payload(
                registry.resolve("reports"),
                {**sample_payloads["reports"], "metrics": {"a": 1}},
            )

    def test_unknown_keys_ignored(self, registry, sample_payloads):
        payload = {
            **sample_payloads["workouts"],
            "_id": "x",
            "createdAt": "2020-01-01",
            "extra": "ignored",
        }

        cleaned = validate_payload(registry.resolve("workouts"), payload)
        assert set(cleaned) == set(sample_payloads["workouts"])


class TestPartialValidation:
    """Tests for update (merge) semantics."""

    def test_omitted_required_allowed(self, registry):
        cleaned = validate_payload(
            registry.resolve("goals"),
            {"currentValue": 3},
            partial=True,
        )
        assert cleaned == {"currentValue": 3}

    def test_emptied_required_rejected(self, registry):
        with pytest.raises(ValidationError) as exc_info:
            validate_payload(registry.resolve("goals"), {"goalName": ""}, partial=True)

        assert exc_info.value.field == "goalName"

    def test_bounds_still_enforced(self, registry):
        with pytest.raises(ValidationError):
            validate_payload(registry.resolve("feedbacks"), {"rating": 9}, partial=True)


class TestPayloadModels:
    """Tests for the generated pydantic request models."""

    def test_one_model_per_entity_and_mode(self, registry):
        goals = registry.resolve("goals")

        create = payload_model(goals)
        update = payload_model(goals, partial=True)

        assert issubclass(create, PayloadSchema)
        assert create is not update
        assert payload_model(goals) is create
        assert create.__name__ == "goals_Create"

    def test_aliases_are_field_names(self, registry):
        feedbacks = registry.resolve("feedbacks")
        model = payload_model(feedbacks)

        aliases = [info.alias for info in model.model_fields.values()]
        assert aliases == list(feedbacks.field_names)

    def test_required_flags(self, registry):
        activities = registry.resolve("activities")

        create = payload_model(activities)
        update = payload_model(activities, partial=True)

        required = {
            info.alias for info in create.model_fields.values() if info.is_required()
        }
        assert required == {"activityType", "duration", "calories", "date"}
        assert not any(info.is_required() for info in update.model_fields.values())

    def test_large_integer_stays_int(self, registry, sample_payloads):
        cleaned = validate_payload(
            registry.resolve("products"),
            {**sample_payloads["products"], "stock": 9007199254740993},
        )
        assert cleaned["stock"] == 9007199254740993
        assert isinstance(cleaned["stock"], int)

    def test_integer_beyond_int64_becomes_float(self, registry, sample_payloads):
        cleaned = validate_payload(
            registry.resolve("products"),
            {**sample_payloads["products"], "stock": 10 ** 20},
        )
        assert cleaned["stock"] == float(10 ** 20)
