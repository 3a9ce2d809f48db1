from solarwatch.ui.date_input import is_valid_display_date

REQUIRED_MESSAGE = "* Required field missing"

EVENT_FIELDS = (
    "date",
    "event_type",
    "location",
    "title",
    "short_description",
    "summary",
    "impact_on_communication",
)

TEXT_FIELDS = EVENT_FIELDS[1:]


def check_event_field(name: str, value: str | None) -> str | None:
    """Error message for one editor field, or None when it is fine."""
    if name == "date":
        return None if is_valid_display_date(value) else REQUIRED_MESSAGE
    return None if (value or "").strip() else REQUIRED_MESSAGE


def validate_event_fields(fields: dict[str, str]) -> dict[str, str]:
    """Map of field -> message for every failing field; empty when the form is valid."""
    errors = {}
    for name in EVENT_FIELDS:
        message = check_event_field(name, fields.get(name))
        if message:
            errors[name] = message
    return errors
