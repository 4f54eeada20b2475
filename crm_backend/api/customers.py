"""
Customers API routes.
"""
import uuid
from typing import List

from fastapi import APIRouter, Depends
from sqlmodel.ext.asyncio.session import AsyncSession

from crm_backend.config import settings
from crm_backend.database import get_session
from crm_backend.services.customer_service import CustomerService
from crm_backend.schemas.customer import CustomerCreate, CustomerUpdate, CustomerResponse
from crm_backend.api.deps import get_current_user
from crm_backend.models.user import User

router = APIRouter(prefix=f"{settings.API_PREFIX}/customers", tags=["customers"])


@router.post("/", response_model=CustomerResponse, status_code=201)
async def create_customer(
    customer_data: CustomerCreate,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    """Create a new customer."""
    customer_service = CustomerService(session)
    return await customer_service.create(current_user.id, customer_data)


@router.get("/", response_model=List[CustomerResponse])
async def list_customers(
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    """List all of the user's customers."""
    customer_service = CustomerService(session)
    return await customer_service.list(current_user.id)


@router.get("/{customer_id}", response_model=CustomerResponse)
async def get_customer(
    customer_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    """Get a customer by ID."""
    customer_service = CustomerService(session)
    return await customer_service.get(current_user.id, customer_id)


@router.put("/{customer_id}", response_model=CustomerResponse)
async def update_customer(
    customer_id: uuid.UUID,
    customer_data: CustomerUpdate,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    """Update a customer."""
    customer_service = CustomerService(session)
    return await customer_service.update(current_user.id, customer_id, customer_data)


@router.delete("/{customer_id}", status_code=204)
async def delete_customer(
    customer_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    """Delete a customer."""
    customer_service = CustomerService(session)
    await customer_service.delete(current_user.id, customer_id)
