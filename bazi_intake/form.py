"""
Field rule engine for the birth-chart intake form.

The host UI owns one FormState per session and replaces it on every
change, blur and submit:

    state = FormState()
    state = edit(state, "year_pillar", "甲子")
    state = blur(state, "year_pillar")
    state, ok = submit(state, on_submit=build_prompt)

Every function here is pure; BaziFormSession wraps them for hosts that
prefer a mutable object. Validation outcomes are error strings, not
exceptions. Only an unknown field name raises.
"""

import logging
from dataclasses import dataclass, field, replace
from typing import Callable, Optional

from bazi_intake.bazi import (
    Gender, LuckDirection,
    is_valid_cycle_code, is_valid_birth_year, is_valid_start_age,
    derive_direction, expected_first_da_yun, luck_cycle_sequence, trim,
)
from bazi_intake.config import LUCK_CYCLE_PREVIEW_COUNT

logger = logging.getLogger(__name__)


# ============================================================
# RECORD
# ============================================================

@dataclass(frozen=True)
class BirthChartInput:
    """The record handed to the prompt generator. Values are kept as typed."""
    name: str = ""
    gender: Gender = Gender.MALE
    birth_year: str = ""
    year_pillar: str = ""
    month_pillar: str = ""
    day_pillar: str = ""
    hour_pillar: str = ""
    start_age: str = ""
    first_da_yun: str = ""

    def to_dict(self):
        return {
            "name": self.name,
            "gender": self.gender.value,
            "birth_year": self.birth_year,
            "year_pillar": self.year_pillar,
            "month_pillar": self.month_pillar,
            "day_pillar": self.day_pillar,
            "hour_pillar": self.hour_pillar,
            "start_age": self.start_age,
            "first_da_yun": self.first_da_yun,
        }


# ============================================================
# RULE TABLE
# ============================================================

@dataclass(frozen=True)
class FieldRule:
    required_message: str
    invalid_message: str
    validator: Callable[[str], bool]

    def check(self, value: str) -> Optional[str]:
        if not trim(value):
            return self.required_message
        if not self.validator(value):
            return self.invalid_message
        return None


_PILLAR_RULE = FieldRule("pillar code required", "must be one of the 60 cycle codes",
                         is_valid_cycle_code)

FIELD_RULES = {
    "birth_year": FieldRule("year required", "year out of [1900,2100]", is_valid_birth_year),
    "year_pillar": _PILLAR_RULE,
    "month_pillar": _PILLAR_RULE,
    "day_pillar": _PILLAR_RULE,
    "hour_pillar": _PILLAR_RULE,
    "start_age": FieldRule("start age required", "must be integer in [1,11]", is_valid_start_age),
    "first_da_yun": FieldRule("first luck-cycle code required", "must be one of the 60 cycle codes",
                              is_valid_cycle_code),
}

REQUIRED_FIELDS = tuple(FIELD_RULES)
UNCHECKED_FIELDS = ("name", "gender")
FIELD_NAMES = UNCHECKED_FIELDS + REQUIRED_FIELDS


def validate_field(name: str, value) -> Optional[str]:
    """Error message for one field, or None if it is acceptable."""
    if name in UNCHECKED_FIELDS:
        return None
    rule = FIELD_RULES.get(name)
    if rule is None:
        raise ValueError(f"Unknown field: {name!r}. Expected one of {', '.join(FIELD_NAMES)}")
    error = rule.check(value)
    if error:
        logger.debug("Field %s rejected %r: %s", name, value, error)
    return error


def validate_form(values: BirthChartInput) -> dict:
    """Errors for every required field at once; empty dict means submittable."""
    errors = {}
    for name in REQUIRED_FIELDS:
        error = validate_field(name, getattr(values, name))
        if error:
            errors[name] = error
    return errors


def is_form_valid(values: BirthChartInput) -> bool:
    return all(FIELD_RULES[name].check(getattr(values, name)) is None
               for name in REQUIRED_FIELDS)


# ============================================================
# FORM STATE TRANSITIONS
# ============================================================

@dataclass(frozen=True)
class FormState:
    values: BirthChartInput = field(default_factory=BirthChartInput)
    errors: dict = field(default_factory=dict)  # field -> message, only failing fields
    touched: frozenset = frozenset()


def _set_error(errors: dict, name: str, error: Optional[str]) -> dict:
    updated = {k: v for k, v in errors.items() if k != name}
    if error:
        updated[name] = error
    return updated


def edit(state: FormState, name: str, value) -> FormState:
    """Apply one raw edit and revalidate that field. Touched state is unchanged."""
    if name not in FIELD_NAMES:
        raise ValueError(f"Unknown field: {name!r}. Expected one of {', '.join(FIELD_NAMES)}")
    if name == "gender":
        value = Gender(value)

    return FormState(
        values=replace(state.values, **{name: value}),
        errors=_set_error(state.errors, name, validate_field(name, value)),
        touched=state.touched,
    )


def blur(state: FormState, name: str) -> FormState:
    """Mark a field as touched and revalidate its current value."""
    if name not in FIELD_NAMES:
        raise ValueError(f"Unknown field: {name!r}. Expected one of {', '.join(FIELD_NAMES)}")
    value = getattr(state.values, name)
    return FormState(
        values=state.values,
        errors=_set_error(state.errors, name, validate_field(name, value)),
        touched=state.touched | {name},
    )


def visible_errors(state: FormState) -> dict:
    """Errors the user should see: only those of touched fields."""
    return {name: msg for name, msg in state.errors.items() if name in state.touched}


def submit(state: FormState,
           on_submit: Optional[Callable[[BirthChartInput], None]] = None) -> tuple[FormState, bool]:
    """
    Full-form validation pass.

    Recomputes every error, marks every field touched, and forwards the
    values unchanged to on_submit when nothing failed.

    Returns:
        (new_state, submitted)
    """
    errors = validate_form(state.values)
    new_state = FormState(values=state.values, errors=errors, touched=frozenset(FIELD_NAMES))

    if errors:
        logger.info("Submission refused, failing fields: %s", ", ".join(errors))
        return new_state, False

    if on_submit is not None:
        on_submit(state.values)
    logger.info("Birth chart record submitted (year pillar %s)", trim(state.values.year_pillar))
    return new_state, True


# ============================================================
# ADVISORY FEEDBACK
# ============================================================

def first_da_yun_hint(values: BirthChartInput) -> Optional[str]:
    """
    Note when the entered first luck cycle is not the month pillar's
    neighbour in the derived direction. Never affects submission.
    """
    if not is_valid_cycle_code(values.first_da_yun):
        return None
    direction = derive_direction(values.year_pillar, values.gender)
    expected = expected_first_da_yun(values.month_pillar, direction)
    if expected is None or trim(values.first_da_yun) == expected:
        return None
    return (f"first luck cycle is usually {expected} "
            f"({direction.value} from month pillar {trim(values.month_pillar)}), "
            f"got {trim(values.first_da_yun)}")


def advisory(values: BirthChartInput, count: int = LUCK_CYCLE_PREVIEW_COUNT) -> dict:
    """UI-only feedback derived from the current values. Not part of the record."""
    direction = derive_direction(values.year_pillar, values.gender)
    return {
        "direction": direction.value,
        "direction_label": direction.label,
        "luck_cycles": luck_cycle_sequence(values.first_da_yun, direction, values.start_age, count),
        "first_da_yun_hint": first_da_yun_hint(values),
    }


# ============================================================
# SESSION
# ============================================================

class BaziFormSession:
    """Owns the state of one form-filling session."""

    def __init__(self, on_submit: Optional[Callable[[BirthChartInput], None]] = None):
        self.state = FormState()
        self._on_submit = on_submit

    @property
    def values(self) -> BirthChartInput:
        return self.state.values

    @property
    def errors(self) -> dict:
        return visible_errors(self.state)

    @property
    def is_valid(self) -> bool:
        return is_form_valid(self.state.values)

    @property
    def direction(self) -> LuckDirection:
        return derive_direction(self.state.values.year_pillar, self.state.values.gender)

    def change(self, name: str, value):
        self.state = edit(self.state, name, value)

    def blur(self, name: str):
        self.state = blur(self.state, name)

    def submit(self) -> bool:
        self.state, submitted = submit(self.state, self._on_submit)
        return submitted
