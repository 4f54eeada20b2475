"""
CSV import service - bulk customer import into a list.

Rows are validated one by one; bad rows are reported and skipped, the rest
are inserted together with their campaign links in a single transaction.
"""
import csv
import io
import logging
import uuid
from dataclasses import dataclass, field
from typing import Dict, List, Tuple

from pydantic import ValidationError as PydanticValidationError
from sqlmodel.ext.asyncio.session import AsyncSession

from crm_backend.core.exceptions import NotFoundError, ValidationError
from crm_backend.core.transaction import atomic
from crm_backend.core.validation import format_errors, summarize_errors
from crm_backend.repositories.customer_repo import CustomerRepository
from crm_backend.repositories.customer_list_repo import CustomerListRepository
from crm_backend.models.activity import Activities
from crm_backend.schemas.customer import CsvCustomerRow
from crm_backend.schemas.customer_list import CsvImportResponse
from crm_backend.services.activity_service import ActivityService
from crm_backend.services.propagation_service import CampaignPropagationService

logger = logging.getLogger(__name__)

# Customer field -> accepted header names (lowercased), highest priority first
COLUMN_ALIASES: Dict[str, Tuple[str, ...]] = {
    "name": ("name",),
    "email": ("email",),
    "phone_number": ("phone", "phone_number", "phonenumber"),
    "status": ("status",),
}


@dataclass
class ParsedCsv:
    """Outcome of parsing: accepted rows plus per-row errors."""
    rows: List[CsvCustomerRow] = field(default_factory=list)
    errors: List[dict] = field(default_factory=list)


def _decode(content: bytes) -> str:
    try:
        return content.decode("utf-8-sig")
    except UnicodeDecodeError:
        raise ValidationError("CSV file must be UTF-8 encoded", field="file")


def _index_header(header: List[str]) -> Dict[str, int]:
    """Position of each lowercased header name; a repeated name keeps its first column."""
    positions = {}
    for position, cell in enumerate(header):
        positions.setdefault(cell.strip().lower(), position)
    return positions


def _build_record(positions: Dict[str, int], cells: List[str]) -> dict:
    """
    Pick each field's value from its aliases in priority order.
    Empty cells count as absent, so a lower-priority alias can still fill in.
    """
    record = {}
    for field_name, aliases in COLUMN_ALIASES.items():
        for alias in aliases:
            position = positions.get(alias)
            value = cells[position].strip() if position is not None else ""
            if value:
                record[field_name] = value
                break
    if "status" in record:
        record["status"] = record["status"].lower()
    return record


def parse_customer_csv(content: bytes) -> ParsedCsv:
    """
    Parse and validate customer CSV content.

    The first non-empty line is the header. Data rows are numbered from 1
    (header excluded, blank lines skipped). A row that fails validation, or
    whose cell count differs from the header's, is recorded as
    {"row": n, "error": message} and does not stop the parse.
    """
    reader = csv.reader(io.StringIO(_decode(content)))

    header = None
    for cells in reader:
        if any(cell.strip() for cell in cells):
            header = cells
            break
    if header is None:
        raise ValidationError("CSV file is empty or missing a header row", field="file")
    positions = _index_header(header)

    parsed = ParsedCsv()
    row_number = 0
    for cells in reader:
        if not any(cell.strip() for cell in cells):
            continue
        row_number += 1

        if len(cells) != len(header):
            parsed.errors.append({
                "row": row_number,
                "error": f"Row has {len(cells)} columns, header has {len(header)}"
            })
            continue

        record = _build_record(positions, cells)
        try:
            parsed.rows.append(CsvCustomerRow.model_validate(record))
        except PydanticValidationError as e:
            message = summarize_errors(format_errors(e.errors()))
            parsed.errors.append({"row": row_number, "error": message})

    return parsed


class CsvImportService:
    """Service for CSV customer imports."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.customer_repo = CustomerRepository(session)
        self.customer_list_repo = CustomerListRepository(session)
        self.activity_service = ActivityService(session)
        self.propagation = CampaignPropagationService(session)

    async def import_csv(
        self,
        user_id: uuid.UUID,
        customer_list_id: uuid.UUID,
        content: bytes
    ) -> CsvImportResponse:
        """
        Import customers from CSV content into one of the owner's lists.

        Partial success is normal: valid rows are imported and invalid ones
        come back in `errors`. If no row is valid nothing is written and a
        ValidationError carrying every row error is raised.
        """
        customer_list = await self.customer_list_repo.get(customer_list_id, user_id)
        if not customer_list:
            raise NotFoundError("Customer list", str(customer_list_id))
        list_name = customer_list.name

        parsed = parse_customer_csv(content)
        if not parsed.rows:
            logger.warning(f"CSV import into list {customer_list_id} rejected: no valid rows")
            raise ValidationError("No valid records found in CSV file", errors=parsed.errors)

        async with atomic(self.session):
            customers = await self.customer_repo.bulk_create(
                user_id,
                customer_list_id,
                [row.model_dump() for row in parsed.rows]
            )
            linked = await self.propagation.extend_on_import(
                user_id, customer_list_id, [customer.id for customer in customers]
            )
            await self.activity_service.record(
                user_id=user_id,
                title=Activities.CUSTOMERS_IMPORTED,
                description=f'Added {len(customers)} customers to "{list_name}"'
            )

        logger.info(
            f"Imported {len(customers)} customer(s) into list {customer_list_id} "
            f"({len(parsed.errors)} row error(s), {linked} campaign link(s))"
        )
        return CsvImportResponse(imported_count=len(customers), errors=parsed.errors)
