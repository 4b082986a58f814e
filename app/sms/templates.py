"""Message template rendering"""

import re
from typing import Any, Mapping

PLACEHOLDER_PATTERN = re.compile(r"\{(company_name|manager_name|phone|use_date|people_count)\}")


def _text(value: Any) -> str:
    return str(value) if value else ""


def render_template(body: str, fields: Mapping[str, Any]) -> str:
    """
    Substitute the five known placeholders in one pass.

    A missing company_name falls back to manager_name; any other missing
    field renders empty. Unknown tokens are left as they are, and values are
    never substituted again.
    """
    values = {
        "company_name": _text(fields.get("company_name") or fields.get("manager_name")),
        "manager_name": _text(fields.get("manager_name")),
        "phone": _text(fields.get("phone")),
        "use_date": _text(fields.get("use_date")),
        "people_count": _text(fields.get("people_count")),
    }
    return PLACEHOLDER_PATTERN.sub(lambda match: values[match.group(1)], body)


def reservation_fields(reservation) -> dict:
    """Template fields of a reservation"""
    return {
        "company_name": reservation.company_name,
        "manager_name": reservation.manager_name,
        "phone": reservation.phone,
        "use_date": reservation.use_date.isoformat() if reservation.use_date else None,
        "people_count": reservation.people_count,
    }
