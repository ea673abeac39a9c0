"""Spreadsheet import of leads.

The first sheet of an .xlsx, .xls or .csv upload is read into rows keyed by
header. Headers are matched loosely (case, spacing and punctuation ignored)
against a short alias list per lead field. Rows that break the lead rules are
reported back by sheet row number (the header is row 1) and skipped; every
other row is numbered from one atomic ID reservation and inserted in the same
transaction.
"""

import csv
import io
import logging
import re
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Iterable, Optional

import openpyxl
import xlrd

from backend.app.models.lead import Lead
from backend.app.services.leads import LeadValidationError, build_lead, validate_lead_fields
from backend.app.services.sequence import reserve_lead_ids
from backend.app.services.timeline import record_event

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = (".xlsx", ".xls", ".csv")

FIELD_ALIASES = {
    "business_name": ("businessname", "business", "company", "companyname"),
    "business_category": ("businesscategory", "category"),
    "business_type": ("businesstype", "type"),
    "contact_person": ("contactperson", "contact", "contactname"),
    "email": ("email", "emailaddress"),
    "phone_number": ("phone", "phonenumber", "mobile", "telephone"),
    "website_url": ("website", "websiteurl", "url"),
    "country": ("country",),
    "state": ("state", "states", "province", "region"),
    "city": ("city", "town"),
    "notes": ("notes", "note", "comments"),
    "service_interest": ("serviceinterest",),
    "website_status": ("websitestatus",),
}
COLUMN_LABELS = {"business_name": "Business Name", "business_category": "Business Category"}


class ImportFileError(ValueError):
    """The upload is not a spreadsheet this pipeline can read."""


@dataclass
class ImportOutcome:
    total_rows: int
    leads: list[Lead] = field(default_factory=list)
    errors: list[dict] = field(default_factory=list)

    @property
    def valid_rows(self) -> int:
        return len(self.leads)


def normalize_header(header) -> str:
    return re.sub(r"[^a-z0-9]", "", str(header or "").lower())


_ALIAS_LOOKUP = {alias: key for key, aliases in FIELD_ALIASES.items() for alias in aliases}


def _cell_text(value) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return str(value)
    if isinstance(value, float) and value.is_integer():
        # spreadsheets hand phone numbers back as floats
        return str(int(value))
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return str(value).strip()


def _read_csv(content: bytes) -> Iterable[list]:
    text = content.decode("utf-8-sig")
    return list(csv.reader(io.StringIO(text)))


def _read_xlsx(content: bytes) -> Iterable[list]:
    workbook = openpyxl.load_workbook(io.BytesIO(content), read_only=True, data_only=True)
    try:
        sheet = workbook.worksheets[0]
        return [list(row) for row in sheet.iter_rows(values_only=True)]
    finally:
        workbook.close()


def _read_xls(content: bytes) -> Iterable[list]:
    book = xlrd.open_workbook(file_contents=content)
    sheet = book.sheet_by_index(0)
    return [sheet.row_values(index) for index in range(sheet.nrows)]


def file_extension(filename: Optional[str]) -> str:
    name = (filename or "").lower()
    for extension in SUPPORTED_EXTENSIONS:
        if name.endswith(extension):
            return extension
    raise ImportFileError("Invalid file type. Please upload an .xlsx, .xls or .csv file")


def parse_rows(filename: Optional[str], content: bytes) -> list[tuple[int, dict[str, str]]]:
    """Return ``(sheet_row_number, {field: text})`` for every non-blank data row."""
    extension = file_extension(filename)
    readers = {".csv": _read_csv, ".xlsx": _read_xlsx, ".xls": _read_xls}
    raw_rows = readers[extension](content)
    if not raw_rows:
        return []

    header = [_ALIAS_LOOKUP.get(normalize_header(cell)) for cell in raw_rows[0]]
    parsed = []
    for offset, raw in enumerate(raw_rows[1:], start=2):
        cells = [_cell_text(value) for value in raw]
        if not any(cells):
            continue
        row = {}
        for key, value in zip(header, cells):
            if key and value and key not in row:
                row[key] = value
        parsed.append((offset, row))
    return parsed


def import_leads(db, filename: Optional[str], content: bytes, creator: dict) -> ImportOutcome:
    """Validate and stage leads from an uploaded spreadsheet; the caller commits."""
    rows = parse_rows(filename, content)
    outcome = ImportOutcome(total_rows=len(rows))

    valid = []
    for row_number, data in rows:
        try:
            validate_lead_fields(data, require_location=False, labels=COLUMN_LABELS)
        except LeadValidationError as exc:
            outcome.errors.append({"row": row_number, "message": str(exc)})
            continue
        valid.append(data)

    lead_ids = reserve_lead_ids(db, len(valid))
    for data, lead_id in zip(valid, lead_ids):
        lead = build_lead(data, lead_id=lead_id, creator=creator, source="import")
        outcome.leads.append(lead)
    db.add_all(outcome.leads)
    db.flush()

    for lead in outcome.leads:
        record_event(
            db,
            lead.id,
            "lead_created",
            "Lead imported",
            f"Lead {lead.lead_id} ({lead.business_name}) was imported from {filename}",
            creator,
            {"leadId": lead.lead_id, "source": "import"},
        )

    logger.info(
        "parsed import %s: %s valid, %s invalid",
        filename,
        outcome.valid_rows,
        len(outcome.errors),
        extra={"rows": outcome.total_rows},
    )
    return outcome
