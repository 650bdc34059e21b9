"""
System configuration registry.

Every platform tunable an admin can edit is declared once here with its type,
category and bounds. Values are validated centrally before they are sent to
``PUT /admin/config/:key``.
"""

import logging
from collections import OrderedDict
from dataclasses import dataclass
from typing import Annotated, Any, Dict, List, Mapping, Optional

from pydantic import Field, TypeAdapter, ValidationError

log = logging.getLogger(__name__)


class ConfigValidationError(ValueError):
    """Raised for unknown config keys and values outside a key's type or range."""

    def __init__(self, message: str, key: Optional[str] = None, value: Any = None):
        super().__init__(message)
        self.key = key
        self.value = value


_PY_TYPES = {"int": int, "float": float, "bool": bool, "str": str}


@dataclass(frozen=True)
class ConfigField:
    key: str
    label: str
    value_type: str
    category: str
    description: str = ""
    min: Optional[float] = None
    max: Optional[float] = None

    def adapter(self) -> TypeAdapter:
        base = _PY_TYPES[self.value_type]
        if self.value_type in ("int", "float"):
            return TypeAdapter(Annotated[base, Field(ge=self.min, le=self.max)])
        if self.value_type == "str":
            return TypeAdapter(Annotated[str, Field(min_length=1)])
        return TypeAdapter(base)


_FIELDS = [
    # security
    ConfigField("MAX_LOGIN_ATTEMPTS", "Max Login Attempts", "int", "security",
                "Maximum number of failed login attempts before account lock", 1, 20),
    ConfigField("LOGIN_LOCKOUT_MINUTES", "Login Lockout Duration (minutes)", "int", "security",
                "Duration of account lock after max failed attempts", 1, 1440),
    ConfigField("OTP_EXPIRY_MINUTES", "OTP Expiry (minutes)", "int", "security",
                "Validity of one-time passwords sent for verification", 1, 60),
    ConfigField("PASSWORD_RESET_EXPIRY_MINUTES", "Password Reset Link Expiry (minutes)", "int", "security",
                "Validity of password reset links", 5, 1440),
    ConfigField("SESSION_TIMEOUT_MINUTES", "Session Timeout (minutes)", "int", "security",
                "Idle time before a member is signed out", 5, 10080),
    # donations
    ConfigField("DEFAULT_DONATION_AMOUNT", "Default Donation Amount", "float", "donations",
                "Default monthly donation amount for members", 0, 1_000_000),
    ConfigField("MIN_DONATION_AMOUNT", "Minimum Donation Amount", "float", "donations",
                "Smallest single donation accepted", 0, 1_000_000),
    ConfigField("MAX_DONATION_AMOUNT", "Maximum Donation Amount", "float", "donations",
                "Largest single donation accepted", 0, 10_000_000),
    ConfigField("DONATION_DUE_DAY", "Donation Due Day", "int", "donations",
                "Day of month by which monthly donations are due", 1, 28),
    ConfigField("MAX_QUEUE_SIZE", "Max Donation Queue Size", "int", "donations",
                "Claims a member may hold in the donation queue at once", 1, 100),
    ConfigField("PAYMENT_GATEWAY_FEE_PERCENT", "Payment Gateway Fee (%)", "float", "donations",
                "Fee added to online payments", 0, 10),
    # membership
    ConfigField("MEMBERSHIP_FEE", "Membership Fee", "float", "membership",
                "One-time membership fee for new members", 0, 1_000_000),
    ConfigField("MONTHLY_SUBSCRIPTION_FEE", "Monthly Subscription Fee", "float", "membership",
                "Recurring subscription fee", 0, 100_000),
    ConfigField("SUBSCRIPTION_GRACE_DAYS", "Subscription Grace Period (days)", "int", "membership",
                "Days after the due date before a subscription lapses", 0, 90),
    # claims
    ConfigField("MAX_CLAIM_AMOUNT", "Maximum Claim Amount", "float", "claims",
                "Upper bound on amountRequested for a new claim", 0, 100_000_000),
    ConfigField("CLAIM_VERIFICATION_SLA_DAYS", "Claim Verification SLA (days)", "int", "claims",
                "Target time for admins to verify a new claim", 1, 90),
    ConfigField("MAX_ACTIVE_CLAIMS_PER_USER", "Max Active Claims per Member", "int", "claims",
                "Open claims a member may raise at once", 1, 20),
    # credit
    ConfigField("INITIAL_CREDIT_SCORE", "Initial Credit Score", "int", "credit",
                "Credit score assigned to new members", 0, 1000),
    ConfigField("CREDIT_SCORE_ONTIME_BONUS", "On-time Donation Bonus", "int", "credit",
                "Credit score added for each on-time monthly donation", 0, 100),
    ConfigField("CREDIT_SCORE_LATE_PENALTY", "Late Donation Penalty", "int", "credit",
                "Credit score removed for each missed or late month", 0, 100),
    ConfigField("MIN_CREDIT_SCORE_FOR_CLAIM", "Minimum Credit Score for Claims", "int", "credit",
                "Members below this score cannot raise claims", 0, 1000),
    # rate_limits
    ConfigField("API_RATE_LIMIT_PER_MINUTE", "API Rate Limit (per minute)", "int", "rate_limits",
                "Requests a member may make per minute", 1, 10_000),
    ConfigField("LOGIN_RATE_LIMIT_PER_MINUTE", "Login Rate Limit (per minute)", "int", "rate_limits",
                "Login attempts allowed per minute per client", 1, 100),
    # notifications
    ConfigField("ENABLE_EMAIL_NOTIFICATIONS", "Email Notifications", "bool", "notifications",
                "Send donation reminders and claim updates by email"),
    ConfigField("ENABLE_SMS_NOTIFICATIONS", "SMS Notifications", "bool", "notifications",
                "Send donation reminders and claim updates by SMS"),
    ConfigField("SUPPORT_EMAIL", "Support Email", "str", "notifications",
                "Address shown to members for help"),
]

CONFIG_SCHEMA: Dict[str, ConfigField] = OrderedDict((field.key, field) for field in _FIELDS)

UNREGISTERED_CATEGORY = "other"


def get_field(key: str) -> ConfigField:
    try:
        return CONFIG_SCHEMA[key]
    except KeyError:
        raise ConfigValidationError(f"Unknown configuration key: {key}", key=key) from None


def validate_config_value(key: str, value: Any) -> Any:
    """Coerce ``value`` to the key's type and check its bounds."""
    field = get_field(key)
    if value is None or (isinstance(value, str) and value.strip() == ""):
        raise ConfigValidationError(f"{field.label} is required", key=key, value=value)
    if isinstance(value, str):
        value = value.strip()
    try:
        return field.adapter().validate_python(value)
    except ValidationError as e:
        reason = e.errors()[0].get("msg", "invalid value") if e.errors() else "invalid value"
        raise ConfigValidationError(f"{field.label}: {reason}", key=key, value=value) from e


def _raw_values(raw: Any) -> Dict[str, Any]:
    if isinstance(raw, Mapping):
        return dict(raw)
    values = {}
    if isinstance(raw, list):
        for entry in raw:
            if isinstance(entry, Mapping) and entry.get("key"):
                values[entry["key"]] = entry.get("value")
    return values


def merge_config(raw: Any) -> List[Dict[str, Any]]:
    """
    Current values laid over the registry.

    ``raw`` is the ``data`` of ``GET /admin/config``: either ``{key: value}``
    or ``[{key, value, category}]``. Every registered key appears once (value
    None when the server has none); unknown server keys are kept under
    category ``other`` rather than dropped.
    """
    values = _raw_values(raw)
    entries = []
    for key, field in CONFIG_SCHEMA.items():
        entries.append({
            "key": key,
            "value": values.get(key),
            "category": field.category,
            "label": field.label,
            "valueType": field.value_type,
            "description": field.description,
            "min": field.min,
            "max": field.max,
        })

    for key, value in values.items():
        if key in CONFIG_SCHEMA:
            continue
        log.debug(f"Config key {key} is not in the registry")
        entries.append({"key": key, "value": value, "category": UNREGISTERED_CATEGORY})
    return entries


def group_by_category(entries: List[Mapping[str, Any]]) -> Dict[str, List[Mapping[str, Any]]]:
    groups: Dict[str, List[Mapping[str, Any]]] = OrderedDict()
    for entry in entries:
        groups.setdefault(entry.get("category") or UNREGISTERED_CATEGORY, []).append(entry)
    return groups
