"""Field contracts for ad request actions.

Each contract is a list of :class:`FieldRule` entries: how to coerce the
raw value, whether it is required, and small pure checks run against the
coerced value. Every field is checked on its own so a caller receives
one message per invalid field in a single pass.

"Today" is injected by the caller; the clock is read only as a fallback
when none is given.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any, Callable, Mapping

from pydantic import TypeAdapter, ValidationError

from dashboard.ads.base import FORM_ERROR_KEY
from dashboard.ads.config import AdSettings, get_ad_settings
from dashboard.shared.utils.datetime_utils import to_date, today_utc

_INT_ADAPTER = TypeAdapter(int)
_DECIMAL_ADAPTER = TypeAdapter(Decimal)
_CENTS = Decimal("0.01")


@dataclass(frozen=True)
class ValidationContext:
    """Everything a check may consult besides the field bag."""

    today: date
    settings: AdSettings
    current: Mapping[str, Any] = field(default_factory=dict)


Check = Callable[[Any, Mapping[str, Any], ValidationContext], "str | None"]
FormCheck = Callable[[Mapping[str, Any], ValidationContext], "str | None"]


@dataclass(frozen=True)
class FieldRule:
    """Contract for one field of an action."""

    name: str
    coerce: Callable[[Any], Any]
    invalid_message: str
    required_message: str | None = None
    checks: tuple[Check, ...] = ()

    @property
    def required(self) -> bool:
        return self.required_message is not None


# ===========================================
# COERCERS
# ===========================================


def is_blank(value: Any) -> bool:
    """Return True for values that count as "not supplied"."""
    return value is None or (isinstance(value, str) and not value.strip())


def as_text(value: Any) -> str:
    if not isinstance(value, str):
        raise ValueError("expected text")
    return value.strip()


def as_date(value: Any) -> date:
    try:
        return to_date(value)
    except TypeError as e:
        raise ValueError(str(e)) from e


def as_int(value: Any) -> int:
    if isinstance(value, bool):
        raise ValueError("booleans are not numbers")
    if isinstance(value, str):
        value = value.strip()
    try:
        return _INT_ADAPTER.validate_python(value)
    except ValidationError as e:
        raise ValueError(str(e)) from e


def as_price(value: Any) -> Decimal:
    if isinstance(value, bool):
        raise ValueError("booleans are not numbers")
    if isinstance(value, str):
        value = value.strip()
    try:
        amount = _DECIMAL_ADAPTER.validate_python(value)
    except ValidationError as e:
        raise ValueError(str(e)) from e
    if not amount.is_finite():
        raise ValueError("price must be finite")
    return amount.quantize(_CENTS)


def as_station_ids(value: Any) -> list[str]:
    """Normalize a station selection to a de-duplicated list of ids."""
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, (list, tuple, set, frozenset)):
        raise ValueError("expected a list of station ids")
    station_ids: list[str] = []
    for item in value:
        if isinstance(item, bool) or not isinstance(item, (str, int)):
            raise ValueError(f"invalid station id: {item!r}")
        item = str(item).strip()
        if item and item not in station_ids:
            station_ids.append(item)
    return station_ids


# ===========================================
# CHECKS
# ===========================================


def min_length(setting: str, message: str) -> Check:
    def check(value: str, fields: Mapping[str, Any], ctx: ValidationContext) -> str | None:
        limit = getattr(ctx.settings, setting)
        return message.format(limit=limit) if len(value) < limit else None

    return check


def within(low_setting: str, high_setting: str, message: str) -> Check:
    def check(value: int, fields: Mapping[str, Any], ctx: ValidationContext) -> str | None:
        low = getattr(ctx.settings, low_setting)
        high = getattr(ctx.settings, high_setting)
        return None if low <= value <= high else message.format(low=low, high=high)

    return check


def non_negative(message: str) -> Check:
    def check(value: Any, fields: Mapping[str, Any], ctx: ValidationContext) -> str | None:
        return message if value < 0 else None

    return check


def not_before_today(message: str) -> Check:
    def check(value: date, fields: Mapping[str, Any], ctx: ValidationContext) -> str | None:
        return message if value < ctx.today else None

    return check


def after_start(value: date, fields: Mapping[str, Any], ctx: ValidationContext) -> str | None:
    start = fields.get("start_date")
    if start is not None and value <= start:
        return "End date must be after start date"
    return None


def _stored_date(ctx: ValidationContext, name: str) -> date | None:
    stored = ctx.current.get(name)
    if is_blank(stored):
        return None
    try:
        return to_date(stored)
    except (TypeError, ValueError):
        return None


def after_effective_start(
    value: date, fields: Mapping[str, Any], ctx: ValidationContext
) -> str | None:
    """Compare against the new start date, falling back to the stored one."""
    start = fields.get("start_date")
    if start is None:
        start = _stored_date(ctx, "start_date")
    if start is not None and value <= start:
        return "End date must be after start date"
    return None


def before_stored_end(
    value: date, fields: Mapping[str, Any], ctx: ValidationContext
) -> str | None:
    """A new start date submitted alone must still precede the stored end date."""
    if "end_date" in fields:
        return None
    end = _stored_date(ctx, "end_date")
    if end is not None and end <= value:
        return "End date must be after start date"
    return None


def non_empty(message: str) -> Check:
    def check(value: list[str], fields: Mapping[str, Any], ctx: ValidationContext) -> str | None:
        return None if value else message

    return check


def some_date_changes(fields: Mapping[str, Any], ctx: ValidationContext) -> str | None:
    if "start_date" in fields or "end_date" in fields:
        return None
    return "At least one date must change"


# ===========================================
# CONTRACTS
# ===========================================

_PAST_START = "Start date cannot be in the past"
_INVALID_DATE = "Enter a valid date"

ACTION_RULES: dict[str, list[FieldRule]] = {
    "reject": [
        FieldRule(
            "rejection_reason",
            as_text,
            "Rejection reason must be text",
            required_message="Rejection reason is required for reject action",
            checks=(
                min_length(
                    "rejection_reason_min_length",
                    "Rejection reason must be at least {limit} characters",
                ),
            ),
        ),
    ],
    "schedule": [
        FieldRule(
            "start_date",
            as_date,
            _INVALID_DATE,
            required_message="Start date is required for schedule action",
            checks=(not_before_today(_PAST_START),),
        ),
        FieldRule("end_date", as_date, _INVALID_DATE, checks=(after_start,)),
    ],
    "cancel": [
        FieldRule("reason", as_text, "Reason must be text"),
    ],
    "review": [
        FieldRule(
            "title",
            as_text,
            "Title must be text",
            checks=(min_length("title_min_length", "Title must be at least {limit} characters"),),
        ),
        FieldRule(
            "description",
            as_text,
            "Description must be text",
            checks=(
                min_length(
                    "description_min_length",
                    "Description must be at least {limit} characters",
                ),
            ),
        ),
        FieldRule(
            "duration_days",
            as_int,
            "Enter a whole number of days",
            checks=(
                within(
                    "min_duration_days",
                    "max_duration_days",
                    "Duration must be between {low} and {high} days",
                ),
            ),
        ),
        FieldRule(
            "admin_price",
            as_price,
            "Price must be a valid positive number",
            checks=(non_negative("Price must be a valid positive number"),),
        ),
        FieldRule("admin_notes", as_text, "Notes must be text"),
        FieldRule("start_date", as_date, _INVALID_DATE, checks=(not_before_today(_PAST_START),)),
        FieldRule(
            "duration_seconds",
            as_int,
            "Enter a whole number of seconds",
            checks=(
                within(
                    "min_duration_seconds",
                    "max_duration_seconds",
                    "Display duration must be between {low} and {high} seconds",
                ),
            ),
        ),
        FieldRule(
            "display_order",
            as_int,
            "Enter a whole number",
            checks=(non_negative("Display order must be 0 or greater"),),
        ),
        FieldRule(
            "station_ids",
            as_station_ids,
            "Select stations from the list",
            checks=(non_empty("At least one station must be selected"),),
        ),
    ],
    "update-schedule": [
        FieldRule(
            "start_date",
            as_date,
            _INVALID_DATE,
            checks=(not_before_today(_PAST_START), before_stored_end),
        ),
        FieldRule(
            "end_date",
            as_date,
            _INVALID_DATE,
            checks=(not_before_today("End date cannot be in the past"), after_effective_start),
        ),
    ],
}

FORM_RULES: dict[str, list[FormCheck]] = {
    "update-schedule": [some_date_changes],
}


def _drop_unchanged_dates(values: dict[str, Any], ctx: ValidationContext) -> None:
    for name in ("start_date", "end_date"):
        stored = ctx.current.get(name)
        if name not in values or is_blank(stored):
            continue
        try:
            if to_date(stored) == values[name]:
                del values[name]
        except (TypeError, ValueError):
            continue


# Per-contract normalization applied after coercion, before checks
PREPARE: dict[str, Callable[[dict[str, Any], ValidationContext], None]] = {
    "update-schedule": _drop_unchanged_dates,
}


def validate_fields(
    contract: str,
    fields: Mapping[str, Any] | None,
    *,
    today: date | None = None,
    current: Mapping[str, Any] | None = None,
    settings: AdSettings | None = None,
) -> tuple[dict[str, Any], dict[str, str]]:
    """
    Check a field bag against the contract of an action.

    Args:
        contract: Action or amendment name (``reject``, ``schedule``,
            ``cancel``, ``review``, ``update-schedule``). Names without
            a contract accept any input and submit nothing.
        fields: Raw values as supplied by the operator.
        today: Reference day for "not in the past" checks.
        current: Values stored on the record (used by ``update-schedule``).
        settings: Limits to validate against.

    Returns:
        ``(normalized_fields, errors)``; ``errors`` is empty on success.
    """
    rules = ACTION_RULES.get(contract, [])
    raw = dict(fields or {})
    ctx = ValidationContext(
        today=today if today is not None else today_utc(),
        settings=settings or get_ad_settings(),
        current=dict(current or {}),
    )

    values: dict[str, Any] = {}
    errors: dict[str, str] = {}

    for rule in rules:
        value = raw.get(rule.name)
        if is_blank(value):
            if rule.required:
                errors[rule.name] = rule.required_message
            continue
        try:
            coerced = rule.coerce(value)
        except ValueError:
            errors[rule.name] = rule.invalid_message
            continue
        values[rule.name] = coerced

    prepare = PREPARE.get(contract)
    if prepare is not None:
        prepare(values, ctx)

    for rule in rules:
        if rule.name not in values:
            continue
        for check in rule.checks:
            message = check(values[rule.name], values, ctx)
            if message:
                errors[rule.name] = message
                break

    # Form-level checks only speak once every field is individually valid
    if not errors:
        for form_check in FORM_RULES.get(contract, []):
            message = form_check(values, ctx)
            if message:
                errors[FORM_ERROR_KEY] = message
                break

    if errors:
        return {}, errors
    return {rule.name: values[rule.name] for rule in rules if rule.name in values}, errors
