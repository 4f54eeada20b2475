"""
Customer lists API routes.
"""
import uuid
from typing import List, Optional

from fastapi import APIRouter, Depends, File, UploadFile
from sqlmodel.ext.asyncio.session import AsyncSession

from crm_backend.config import settings
from crm_backend.database import get_session
from crm_backend.core.exceptions import ValidationError, PayloadTooLargeError
from crm_backend.services.customer_list_service import CustomerListService
from crm_backend.services.csv_import_service import CsvImportService
from crm_backend.schemas.customer_list import (
    CustomerListCreate, CustomerListUpdate, CustomerListResponse, CsvImportResponse
)
from crm_backend.schemas.customer import CustomerResponse
from crm_backend.api.deps import get_current_user
from crm_backend.models.user import User

router = APIRouter(prefix=f"{settings.API_PREFIX}/customer-lists", tags=["customer-lists"])

CSV_CONTENT_TYPES = ("text/csv", "application/csv")


@router.post("/", response_model=CustomerListResponse, status_code=201)
async def create_customer_list(
    list_data: CustomerListCreate,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    """Create a new customer list."""
    customer_list_service = CustomerListService(session)
    return await customer_list_service.create(current_user.id, list_data)


@router.get("/", response_model=List[CustomerListResponse])
async def list_customer_lists(
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    """List the user's customer lists."""
    customer_list_service = CustomerListService(session)
    return await customer_list_service.list(current_user.id)


@router.get("/{customer_list_id}", response_model=CustomerListResponse)
async def get_customer_list(
    customer_list_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    """Get a customer list by ID."""
    customer_list_service = CustomerListService(session)
    return await customer_list_service.get(current_user.id, customer_list_id)


@router.put("/{customer_list_id}", response_model=CustomerListResponse)
async def update_customer_list(
    customer_list_id: uuid.UUID,
    list_data: CustomerListUpdate,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    """Update a customer list."""
    customer_list_service = CustomerListService(session)
    return await customer_list_service.update(current_user.id, customer_list_id, list_data)


@router.delete("/{customer_list_id}", status_code=204)
async def delete_customer_list(
    customer_list_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    """Delete a customer list together with its customers."""
    customer_list_service = CustomerListService(session)
    await customer_list_service.delete(current_user.id, customer_list_id)


@router.get("/{customer_list_id}/customers", response_model=List[CustomerResponse])
async def list_customers_in_list(
    customer_list_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    """Get all customers in a customer list."""
    customer_list_service = CustomerListService(session)
    return await customer_list_service.get_customers(current_user.id, customer_list_id)


@router.post("/{customer_list_id}/upload-csv", response_model=CsvImportResponse, status_code=201)
async def upload_csv(
    customer_list_id: uuid.UUID,
    file: Optional[UploadFile] = File(None),
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    """Import customers into a list from an uploaded CSV file."""
    if file is None:
        raise ValidationError("No file uploaded", field="file")

    filename = (file.filename or "").lower()
    if file.content_type not in CSV_CONTENT_TYPES and not filename.endswith(".csv"):
        raise ValidationError("Only CSV files are allowed", field="file")

    content = await file.read(settings.CSV_MAX_UPLOAD_BYTES + 1)
    if len(content) > settings.CSV_MAX_UPLOAD_BYTES:
        raise PayloadTooLargeError(settings.CSV_MAX_UPLOAD_BYTES)

    import_service = CsvImportService(session)
    return await import_service.import_csv(current_user.id, customer_list_id, content)
