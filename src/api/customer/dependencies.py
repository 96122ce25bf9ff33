"""FastAPI dependency providers for the Customer bounded context."""

import asyncio
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from customer.application.observability import (
    CustomerServiceProbe,
    DefaultCustomerServiceProbe,
)
from customer.application.policy import AccessPolicyEvaluator
from customer.application.services import CustomerService, TenantIndexSynchronizer
from customer.infrastructure.customer_repository import CustomerRepository
from customer.infrastructure.models import VISIBILITY_COLUMNS
from infrastructure.authorization_dependencies import get_tenant_index_client
from infrastructure.database.dependencies import get_read_session, get_write_session
from infrastructure.settings import get_searchguard_settings
from shared_kernel.authorization.protocols import TenantIndexProvider

# One resync in flight per process; every synchronizer shares this lock.
_resync_lock = asyncio.Lock()


def get_resync_lock() -> asyncio.Lock:
    """Get the process-wide lock serializing tenant index resyncs."""
    return _resync_lock


def get_customer_service_probe() -> CustomerServiceProbe:
    """Get CustomerServiceProbe instance."""
    return DefaultCustomerServiceProbe()


def get_access_policy() -> AccessPolicyEvaluator:
    """Get an AccessPolicyEvaluator over the customer and project tables."""
    return AccessPolicyEvaluator(VISIBILITY_COLUMNS)


def get_customer_repository(
    session: Annotated[AsyncSession, Depends(get_write_session)],
) -> CustomerRepository:
    """Get CustomerRepository instance.

    Args:
        session: Async database session

    Returns:
        CustomerRepository bound to the request session
    """
    return CustomerRepository(session=session)


def get_customer_read_repository(
    session: Annotated[AsyncSession, Depends(get_read_session)],
) -> CustomerRepository:
    """Get a CustomerRepository bound to the read session.

    Used for permission-filtered lookups and listings only.
    """
    return CustomerRepository(session=session)


def get_tenant_index_synchronizer(
    customer_repo: Annotated[CustomerRepository, Depends(get_customer_repository)],
    index: Annotated[TenantIndexProvider, Depends(get_tenant_index_client)],
    lock: Annotated[asyncio.Lock, Depends(get_resync_lock)],
) -> TenantIndexSynchronizer:
    """Get TenantIndexSynchronizer instance.

    Args:
        customer_repo: Customer repository (shares session via FastAPI dependency caching)
        index: SearchGuard tenant index client
        lock: Process-wide resync lock

    Returns:
        TenantIndexSynchronizer pushing to the configured role
    """
    return TenantIndexSynchronizer(
        repository=customer_repo,
        index=index,
        role_name=get_searchguard_settings().role_name,
        lock=lock,
    )


def get_customer_service(
    customer_repo: Annotated[CustomerRepository, Depends(get_customer_repository)],
    synchronizer: Annotated[
        TenantIndexSynchronizer, Depends(get_tenant_index_synchronizer)
    ],
    session: Annotated[AsyncSession, Depends(get_write_session)],
    probe: Annotated[CustomerServiceProbe, Depends(get_customer_service_probe)],
    policy: Annotated[AccessPolicyEvaluator, Depends(get_access_policy)],
    read_repo: Annotated[
        CustomerRepository, Depends(get_customer_read_repository)
    ],
    read_session: Annotated[AsyncSession, Depends(get_read_session)],
) -> CustomerService:
    """Get CustomerService instance.

    Args:
        customer_repo: Customer repository
        synchronizer: Tenant index synchronizer
        session: Database session for transaction management
        probe: Customer service probe for observability
        policy: Access policy evaluator
        read_repo: Customer repository on the read session
        read_session: Read session for lookup and listing transactions

    Returns:
        CustomerService instance
    """
    return CustomerService(
        customer_repository=customer_repo,
        synchronizer=synchronizer,
        session=session,
        policy=policy,
        probe=probe,
        read_repository=read_repo,
        read_session=read_session,
    )
