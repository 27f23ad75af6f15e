"""
Form validation for the console screens.

Each validator takes the raw form values (strings as typed into the fields)
and returns a dict of field name -> message. An empty dict means the form is
valid. Time fields that pass are rewritten in place as zero-padded "HH:MM".
"""

from datetime import date
from typing import Callable, Dict, List, Optional

from . import database
from .models import STAFF_ROLES, normalize_time

REQUIRED = "Required"
INVALID = "Invalid"


def _blank(value) -> bool:
    return value is None or not str(value).strip()


def _parse_date(value) -> Optional[date]:
    try:
        return date.fromisoformat(str(value).strip())
    except ValueError:
        return None


def _parse_positive_int(value) -> Optional[int]:
    try:
        number = int(str(value).strip())
    except (TypeError, ValueError):
        return None
    return number if number > 0 else None


def _check_time_range(form: Dict, errors: Dict[str, str]) -> None:
    """Flag malformed times and ranges that do not move forward.

    Valid times are rewritten in the form as zero-padded "HH:MM".
    """
    parsed = {}
    for field in ("start_time", "end_time"):
        value = (form.get(field) or "").strip()
        if not value or field in errors:
            continue
        try:
            form[field] = normalize_time(value)
        except ValueError:
            errors[field] = INVALID
            continue
        parsed[field] = form[field]
    if len(parsed) == 2 and parsed["end_time"] <= parsed["start_time"]:
        errors["end_time"] = "EndTime must be after StartTime"


def validate_branch_form(form: Dict) -> Dict[str, str]:
    """Validate the branch form, including every room row."""
    errors = {}
    if _blank(form.get("name")):
        errors["name"] = REQUIRED
    if _blank(form.get("internal_name")):
        errors["internal_name"] = REQUIRED
    if _blank(form.get("location")):
        errors["location"] = REQUIRED

    if not form.get("rooms"):
        errors["rooms"] = REQUIRED
    for idx, room in enumerate(form.get("rooms") or []):
        if _blank(room.get("room_name")):
            errors[f"rooms.{idx}.room_name"] = REQUIRED
        if _parse_positive_int(room.get("capacity")) is None:
            errors[f"rooms.{idx}.capacity"] = INVALID

    internal_name = (form.get("internal_name") or "").strip()
    if internal_name and database.branch_internal_name_exists(internal_name, form.get("id")):
        errors["internal_name"] = "Internal code must be unique"
    return errors


def validate_batch_form(form: Dict, existing_batches: Optional[List] = None,
                        editing_id: Optional[str] = None) -> Dict[str, str]:
    """Validate the batch form.

    ``existing_batches`` is used for the internal code uniqueness check and to
    find the enrolled count of the batch being edited. When omitted the
    batches are loaded from the database.
    """
    if existing_batches is None:
        existing_batches = database.get_all_batches()

    errors = {}
    for field in ("name", "internal_name", "branch_id", "program", "start_date", "end_date"):
        if _blank(form.get(field)):
            errors[field] = REQUIRED
    if not form.get("days"):
        errors["days"] = "Pick at least one day"
    for field in ("start_time", "end_time"):
        if _blank(form.get(field)):
            errors[field] = REQUIRED
    capacity = _parse_positive_int(form.get("capacity"))
    if capacity is None:
        errors["capacity"] = INVALID
    for field in ("admission_start_date", "admission_end_date"):
        if _blank(form.get(field)):
            errors[field] = REQUIRED

    internal_name = (form.get("internal_name") or "").strip().lower()
    if internal_name:
        for batch in existing_batches:
            if batch.internal_name.lower() == internal_name and batch.id != editing_id:
                errors["internal_name"] = "Internal code must be unique"
                break

    start_date = _parse_date(form.get("start_date") or "")
    end_date = _parse_date(form.get("end_date") or "")
    admission_start = _parse_date(form.get("admission_start_date") or "")
    admission_end = _parse_date(form.get("admission_end_date") or "")
    for field, parsed in (("start_date", start_date), ("end_date", end_date),
                          ("admission_start_date", admission_start),
                          ("admission_end_date", admission_end)):
        if parsed is None and field not in errors:
            errors[field] = INVALID

    if start_date and end_date and end_date < start_date:
        errors["end_date"] = "EndDate must be on/after StartDate"
    if admission_start and start_date and admission_start > start_date:
        errors["admission_start_date"] = "AdmissionStart ≤ StartDate"
    if admission_end and start_date and admission_end > start_date:
        errors["admission_end_date"] = "AdmissionEnd ≤ StartDate"
    if admission_start and admission_end and admission_end < admission_start:
        errors["admission_end_date"] = "AdmissionEnd ≥ AdmissionStart"

    _check_time_range(form, errors)

    if editing_id and capacity is not None:
        editing = next((b for b in existing_batches if b.id == editing_id), None)
        if editing and capacity < editing.enrolled:
            errors["capacity"] = f"Capacity must be ≥ enrolled ({editing.enrolled})"
    return errors


def validate_time_block_form(form: Dict) -> Dict[str, str]:
    """Validate a custom time block."""
    errors = {}
    if _blank(form.get("name")):
        errors["name"] = REQUIRED
    if _blank(form.get("date")):
        errors["date"] = REQUIRED
    elif _parse_date(form["date"]) is None:
        errors["date"] = INVALID

    if form.get("block_type") == "Time Range":
        for field in ("start_time", "end_time"):
            if _blank(form.get(field)):
                errors[field] = REQUIRED
        _check_time_range(form, errors)

    if not form.get("all_branches") and _blank(form.get("branch_id")):
        errors["branch_id"] = REQUIRED
    return errors


def validate_generator_form(form: Dict) -> Dict[str, str]:
    """Validate the activity generator inputs (time range and room)."""
    errors = {}
    for field in ("start_time", "end_time", "room"):
        if _blank(form.get(field)):
            errors[field] = REQUIRED
    _check_time_range(form, errors)
    return errors


def validate_staff_user_form(form: Dict) -> Dict[str, str]:
    """Name, email and role are required; the branch only matters for managers."""
    errors = {}
    for field in ("name", "email", "role"):
        if _blank(form.get(field)):
            errors[field] = REQUIRED
    role = form.get("role")
    if role and role not in STAFF_ROLES:
        errors["role"] = INVALID
    return errors


def submit_form(form: Dict, validator: Callable[[Dict], Dict[str, str]],
                on_create: Callable[[Dict], object]):
    """Run ``validator`` and call ``on_create`` only when the form is valid.

    Returns ``(errors, result)`` where result is whatever ``on_create``
    returned, or None when validation failed.
    """
    errors = validator(form)
    if errors:
        return errors, None
    return errors, on_create(form)
