import pytest

from app_config_registry import (
    CONFIG_SCHEMA,
    UNREGISTERED_CATEGORY,
    ConfigValidationError,
    get_field,
    group_by_category,
    merge_config,
    validate_config_value,
)


def test_every_field_is_well_formed():
    for key, field in CONFIG_SCHEMA.items():
        assert field.key == key
        assert field.value_type in ("int", "float", "bool", "str")
        if field.min is not None and field.max is not None:
            assert field.min <= field.max


def test_int_values_are_coerced_and_bounded():
    assert validate_config_value("MAX_LOGIN_ATTEMPTS", 5) == 5
    assert validate_config_value("MAX_LOGIN_ATTEMPTS", " 7 ") == 7
    assert validate_config_value("MAX_LOGIN_ATTEMPTS", 20) == 20


@pytest.mark.parametrize("value", [0, 21, 2.5, "many"])
def test_int_values_out_of_range_or_wrong_type(value):
    with pytest.raises(ConfigValidationError) as exc_info:
        validate_config_value("MAX_LOGIN_ATTEMPTS", value)

    assert exc_info.value.key == "MAX_LOGIN_ATTEMPTS"
    assert str(exc_info.value).startswith("Max Login Attempts:")


def test_blank_value_is_required():
    with pytest.raises(ConfigValidationError, match="Donation Due Day is required"):
        validate_config_value("DONATION_DUE_DAY", "   ")


def test_float_and_bool_values():
    assert validate_config_value("DEFAULT_DONATION_AMOUNT", "250.50") == 250.5
    assert validate_config_value("ENABLE_EMAIL_NOTIFICATIONS", "false") is False
    assert validate_config_value("ENABLE_SMS_NOTIFICATIONS", True) is True


def test_string_value_is_trimmed():
    assert validate_config_value("SUPPORT_EMAIL", " help@esct.org ") == "help@esct.org"


@pytest.mark.parametrize(
    "key, value, label",
    [
        ("SUPPORT_EMAIL", "", "Support Email"),
        ("SUPPORT_EMAIL", "   ", "Support Email"),
        ("ENABLE_SMS_NOTIFICATIONS", " ", "SMS Notifications"),
        ("DEFAULT_DONATION_AMOUNT", None, "Default Donation Amount"),
    ],
)
def test_blank_value_is_required_for_every_type(key, value, label):
    with pytest.raises(ConfigValidationError) as exc_info:
        validate_config_value(key, value)

    assert str(exc_info.value) == f"{label} is required"
    assert exc_info.value.key == key


def test_unknown_key():
    with pytest.raises(ConfigValidationError, match="Unknown configuration key: NOPE") as exc_info:
        get_field("NOPE")

    assert exc_info.value.key == "NOPE"
    assert isinstance(exc_info.value, ValueError)


def test_merge_config_from_mapping_keeps_unregistered_keys():
    # Arrange
    raw = {"MAX_LOGIN_ATTEMPTS": 3, "LEGACY_FLAG": "on"}

    # Act
    entries = merge_config(raw)

    # Assert
    by_key = {entry["key"]: entry for entry in entries}
    assert len(entries) == len(CONFIG_SCHEMA) + 1
    assert by_key["MAX_LOGIN_ATTEMPTS"]["value"] == 3
    assert by_key["MAX_LOGIN_ATTEMPTS"]["category"] == "security"
    assert by_key["DONATION_DUE_DAY"]["value"] is None
    assert by_key["LEGACY_FLAG"] == {"key": "LEGACY_FLAG", "value": "on", "category": UNREGISTERED_CATEGORY}


def test_merge_config_from_entry_list():
    raw = [{"key": "DONATION_DUE_DAY", "value": 10, "category": "donations"}, {"value": "no key"}, "junk"]

    entries = merge_config(raw)

    assert len(entries) == len(CONFIG_SCHEMA)
    assert {entry["key"]: entry["value"] for entry in entries}["DONATION_DUE_DAY"] == 10


def test_merge_config_of_nothing_lists_registry():
    assert [entry["key"] for entry in merge_config(None)] == list(CONFIG_SCHEMA)


def test_group_by_category():
    groups = group_by_category(merge_config({"X_UNKNOWN": 1}))

    assert list(groups)[:2] == ["security", "donations"]
    assert groups[UNREGISTERED_CATEGORY] == [{"key": "X_UNKNOWN", "value": 1, "category": UNREGISTERED_CATEGORY}]
    assert sum(len(entries) for entries in groups.values()) == len(CONFIG_SCHEMA) + 1
