"""CSV rendering of lead lists for downloads."""

import csv
import io

from backend.app.core.time import ensure_utc

EXPORT_COLUMNS = (
    ("Lead ID", "lead_id"),
    ("Business Name", "business_name"),
    ("Contact Person", "contact_person"),
    ("Phone Number", "phone_number"),
    ("Email", "email"),
    ("Business Category", "business_category"),
    ("Business Type", "business_type"),
    ("Website URL", "website_url"),
    ("City", "city"),
    ("State", "state"),
    ("Country", "country"),
    ("Status", "status"),
    ("Priority", "priority"),
    ("Follow-up Date", "follow_up_date"),
    ("Source", "source"),
    ("Service Interest", "service_interest"),
    ("Website Status", "website_status"),
    ("Notes", "notes"),
)


def _cell(lead, attr: str) -> str:
    value = getattr(lead, attr)
    if value is None:
        return ""
    if attr == "follow_up_date":
        return ensure_utc(value).date().isoformat()
    return str(value)


def leads_to_csv(leads) -> str:
    output = io.StringIO()
    writer = csv.writer(output, quoting=csv.QUOTE_ALL)
    writer.writerow([header for header, _ in EXPORT_COLUMNS])
    for lead in leads:
        writer.writerow([_cell(lead, attr) for _, attr in EXPORT_COLUMNS])
    return output.getvalue()


def attachment_filename(name: str) -> str:
    """Filesystem- and header-safe version of a segment name."""
    cleaned = "".join(ch if ch.isalnum() or ch in "-_ " else "_" for ch in name).strip()
    return f"{cleaned or 'segment'}-leads.csv"
