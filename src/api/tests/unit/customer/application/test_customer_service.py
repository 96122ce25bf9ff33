"""Unit tests for CustomerService.

The repository and synchronizer are mocked; these tests cover operation
sequencing, result mapping and when the tenant index is resynced.
"""

from datetime import UTC, datetime
from unittest.mock import AsyncMock, Mock

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from customer.application.observability import CustomerServiceProbe
from customer.application.policy import AccessPolicyEvaluator
from customer.application.results import ErrorKind
from customer.application.services import CustomerService, TenantIndexSynchronizer
from customer.domain.value_objects import (
    Customer,
    CustomerFilters,
    CustomerInput,
    CustomerPatch,
)
from customer.infrastructure.models import VISIBILITY_COLUMNS
from customer.ports.exceptions import (
    CustomerStoreError,
    DuplicateCustomerNameError,
    TenantSyncError,
)
from customer.ports.repositories import ICustomerRepository
from shared_kernel.authorization.types import (
    CallerCredentials,
    CallerRole,
    PermissionSet,
    TenantAccessMapping,
)

CREATED = datetime(2024, 1, 2, 3, 4, 5, tzinfo=UTC)


def make_customer(customer_id: int = 1, name: str = "acme", **kwargs) -> Customer:
    return Customer(
        id=customer_id,
        name=name,
        comment=kwargs.get("comment"),
        private_key=kwargs.get("private_key"),
        created=CREATED,
    )


@pytest.fixture
def mock_customer_repo():
    """Mock ICustomerRepository with async operations."""
    repo = Mock(spec=ICustomerRepository)
    repo.create = AsyncMock()
    repo.get_by_id = AsyncMock(return_value=None)
    repo.get_by_name = AsyncMock(return_value=None)
    repo.get_by_project_id = AsyncMock(return_value=None)
    repo.list_all = AsyncMock(return_value=[])
    repo.list_names = AsyncMock(return_value=[])
    repo.update = AsyncMock()
    repo.delete = AsyncMock(return_value=True)
    repo.delete_all = AsyncMock(return_value=0)
    return repo


@pytest.fixture
def mock_synchronizer():
    """Mock TenantIndexSynchronizer whose resync succeeds."""
    synchronizer = Mock(spec=TenantIndexSynchronizer)
    synchronizer.resync = AsyncMock(
        return_value=TenantAccessMapping.from_customer_names(["acme"])
    )
    return synchronizer


@pytest.fixture
def mock_probe():
    """Mock CustomerServiceProbe."""
    return Mock(spec=CustomerServiceProbe)


@pytest.fixture
def customer_service(mock_customer_repo, mock_synchronizer, mock_session, mock_probe):
    """CustomerService wired with mocks."""
    return CustomerService(
        customer_repository=mock_customer_repo,
        synchronizer=mock_synchronizer,
        session=mock_session,
        policy=AccessPolicyEvaluator(VISIBILITY_COLUMNS),
        probe=mock_probe,
    )


class TestAddCustomer:
    """Tests for CustomerService.add_customer."""

    @pytest.mark.asyncio
    async def test_admin_creates_customer_and_resyncs(
        self,
        customer_service,
        mock_customer_repo,
        mock_synchronizer,
        admin_credentials,
    ):
        """Admin create returns the stored row and resyncs the index."""
        created = make_customer(1, "acme")
        mock_customer_repo.create.return_value = created

        result = await customer_service.add_customer(
            admin_credentials, CustomerInput(id=1, name="acme")
        )

        assert result.ok
        assert result.value == created
        assert result.value.comment is None
        mock_customer_repo.create.assert_awaited_once_with(
            CustomerInput(id=1, name="acme")
        )
        mock_synchronizer.resync.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_non_admin_is_rejected_without_store_call(
        self,
        customer_service,
        mock_customer_repo,
        mock_synchronizer,
        mock_probe,
        user_credentials,
    ):
        """Non-admin create fails with AUTHORIZATION and touches nothing."""
        result = await customer_service.add_customer(
            user_credentials, CustomerInput(name="acme")
        )

        assert not result.ok
        assert result.error.kind == ErrorKind.AUTHORIZATION
        assert result.value is None
        mock_customer_repo.create.assert_not_called()
        mock_synchronizer.resync.assert_not_called()
        mock_probe.operation_denied.assert_called_once()

    @pytest.mark.asyncio
    async def test_non_admin_with_grants_is_still_rejected(
        self, customer_service, mock_customer_repo
    ):
        """Grants only widen visibility, never mutation rights."""
        credentials = CallerCredentials(
            role=CallerRole.USER,
            permissions=PermissionSet.of(customers=[1], projects=[2]),
        )

        result = await customer_service.add_customer(
            credentials, CustomerInput(name="acme")
        )

        assert result.error.kind == ErrorKind.AUTHORIZATION
        mock_customer_repo.create.assert_not_called()

    @pytest.mark.asyncio
    async def test_duplicate_name_is_conflict(
        self,
        customer_service,
        mock_customer_repo,
        mock_synchronizer,
        admin_credentials,
    ):
        """A unique-name violation maps to CONFLICT without a resync."""
        mock_customer_repo.create.side_effect = DuplicateCustomerNameError(
            "create", "acme"
        )

        result = await customer_service.add_customer(
            admin_credentials, CustomerInput(name="acme")
        )

        assert result.error.kind == ErrorKind.CONFLICT
        assert "acme" in result.error.message
        mock_synchronizer.resync.assert_not_called()

    @pytest.mark.asyncio
    async def test_store_failure_is_store_error(
        self,
        customer_service,
        mock_customer_repo,
        mock_synchronizer,
        admin_credentials,
    ):
        mock_customer_repo.create.side_effect = CustomerStoreError(
            "create", "OperationalError"
        )

        result = await customer_service.add_customer(
            admin_credentials, CustomerInput(name="acme")
        )

        assert result.error.kind == ErrorKind.STORE
        mock_synchronizer.resync.assert_not_called()

    @pytest.mark.asyncio
    async def test_failed_resync_keeps_committed_customer(
        self,
        customer_service,
        mock_customer_repo,
        mock_synchronizer,
        mock_probe,
        admin_credentials,
    ):
        """The created row is returned alongside a SYNC error."""
        created = make_customer(1, "acme")
        mock_customer_repo.create.return_value = created
        mock_synchronizer.resync.side_effect = TenantSyncError(
            "SearchGuard Error while replacing role lagoonadmin: 503"
        )

        result = await customer_service.add_customer(
            admin_credentials, CustomerInput(name="acme")
        )

        assert not result.ok
        assert result.error.kind == ErrorKind.SYNC
        assert "SearchGuard" in result.error.message
        assert result.value == created
        mock_probe.tenant_index_stale.assert_called_once()

    @pytest.mark.asyncio
    async def test_create_and_resync_use_separate_transactions(
        self,
        customer_service,
        mock_customer_repo,
        mock_session,
        admin_credentials,
    ):
        """Resync runs after the create transaction has committed."""
        mock_customer_repo.create.return_value = make_customer()

        await customer_service.add_customer(
            admin_credentials, CustomerInput(name="acme")
        )

        assert mock_session.begin.call_count == 2


class TestReads:
    """Tests for the permission-filtered read operations."""

    @pytest.mark.asyncio
    async def test_admin_reads_without_predicate(
        self, customer_service, mock_customer_repo, admin_credentials
    ):
        customer = make_customer(5, "globex")
        mock_customer_repo.get_by_id.return_value = customer

        result = await customer_service.get_customer_by_id(admin_credentials, 5)

        assert result.ok
        assert result.value == customer
        mock_customer_repo.get_by_id.assert_awaited_once_with(5, None)

    @pytest.mark.asyncio
    async def test_non_admin_read_passes_predicate(
        self, customer_service, mock_customer_repo
    ):
        credentials = CallerCredentials(
            role=CallerRole.USER, permissions=PermissionSet.of(customers=[5])
        )
        mock_customer_repo.get_by_name.return_value = make_customer(5, "globex")

        result = await customer_service.get_customer_by_name(credentials, "globex")

        assert result.ok
        args = mock_customer_repo.get_by_name.await_args.args
        assert args[0] == "globex"
        assert args[1] is not None

    @pytest.mark.asyncio
    async def test_invisible_customer_is_not_found(
        self, customer_service, mock_customer_repo, user_credentials
    ):
        """Rows outside the caller's grants are indistinguishable from absent."""
        mock_customer_repo.get_by_id.return_value = None

        result = await customer_service.get_customer_by_id(user_credentials, 5)

        assert result.error.kind == ErrorKind.NOT_FOUND
        assert "5" in result.error.message

    @pytest.mark.asyncio
    async def test_get_by_project_id(
        self, customer_service, mock_customer_repo, admin_credentials
    ):
        customer = make_customer(3, "acme")
        mock_customer_repo.get_by_project_id.return_value = customer

        result = await customer_service.get_customer_by_project_id(
            admin_credentials, 30
        )

        assert result.value == customer
        mock_customer_repo.get_by_project_id.assert_awaited_once_with(30, None)

    @pytest.mark.asyncio
    async def test_read_store_failure(
        self, customer_service, mock_customer_repo, admin_credentials
    ):
        mock_customer_repo.get_by_name.side_effect = CustomerStoreError(
            "get_by_name", "OperationalError"
        )

        result = await customer_service.get_customer_by_name(
            admin_credentials, "acme"
        )

        assert result.error.kind == ErrorKind.STORE

    @pytest.mark.asyncio
    async def test_empty_listing_is_success(
        self, customer_service, mock_customer_repo, user_credentials
    ):
        mock_customer_repo.list_all.return_value = []

        result = await customer_service.list_customers(user_credentials)

        assert result.ok
        assert result.value == []

    @pytest.mark.asyncio
    async def test_listing_forwards_filters(
        self, customer_service, mock_customer_repo, admin_credentials
    ):
        filters = CustomerFilters(created_after=CREATED)
        customers = [make_customer(1, "acme"), make_customer(2, "globex")]
        mock_customer_repo.list_all.return_value = customers

        result = await customer_service.list_customers(admin_credentials, filters)

        assert result.value == customers
        mock_customer_repo.list_all.assert_awaited_once_with(filters, None)

    @pytest.mark.asyncio
    async def test_reads_never_resync(
        self,
        customer_service,
        mock_customer_repo,
        mock_synchronizer,
        admin_credentials,
    ):
        mock_customer_repo.get_by_id.return_value = make_customer()

        await customer_service.get_customer_by_id(admin_credentials, 1)
        await customer_service.list_customers(admin_credentials)

        mock_synchronizer.resync.assert_not_called()


class TestReadSession:
    """Lookups and listings run on the read repository and session."""

    @pytest.fixture
    def read_session(self):
        session = Mock(spec=AsyncSession)
        ctx_manager = AsyncMock()
        ctx_manager.__aenter__ = AsyncMock(return_value=None)
        ctx_manager.__aexit__ = AsyncMock(return_value=None)
        session.begin = Mock(return_value=ctx_manager)
        return session

    @pytest.fixture
    def read_repo(self):
        repo = Mock(spec=ICustomerRepository)
        repo.get_by_id = AsyncMock(return_value=make_customer(7, "initech"))
        repo.list_all = AsyncMock(return_value=[make_customer(7, "initech")])
        return repo

    @pytest.fixture
    def split_service(
        self,
        mock_customer_repo,
        mock_synchronizer,
        mock_session,
        mock_probe,
        read_repo,
        read_session,
    ):
        return CustomerService(
            customer_repository=mock_customer_repo,
            synchronizer=mock_synchronizer,
            session=mock_session,
            policy=AccessPolicyEvaluator(VISIBILITY_COLUMNS),
            probe=mock_probe,
            read_repository=read_repo,
            read_session=read_session,
        )

    @pytest.mark.asyncio
    async def test_lookup_uses_read_session(
        self,
        split_service,
        mock_customer_repo,
        mock_session,
        read_repo,
        read_session,
        admin_credentials,
    ):
        result = await split_service.get_customer_by_id(admin_credentials, 7)

        assert result.value.name == "initech"
        read_repo.get_by_id.assert_awaited_once_with(7, None)
        read_session.begin.assert_called_once()
        mock_customer_repo.get_by_id.assert_not_called()
        mock_session.begin.assert_not_called()

    @pytest.mark.asyncio
    async def test_listing_uses_read_session(
        self, split_service, mock_session, read_repo, read_session, user_credentials
    ):
        result = await split_service.list_customers(user_credentials)

        assert result.ok
        read_repo.list_all.assert_awaited_once()
        read_session.begin.assert_called_once()
        mock_session.begin.assert_not_called()

    @pytest.mark.asyncio
    async def test_mutation_and_resync_stay_on_write_session(
        self,
        split_service,
        mock_customer_repo,
        mock_session,
        read_session,
        admin_credentials,
    ):
        mock_customer_repo.create.return_value = make_customer(8, "hooli")

        result = await split_service.add_customer(
            admin_credentials, CustomerInput(name="hooli")
        )

        assert result.ok
        assert mock_session.begin.call_count == 2
        read_session.begin.assert_not_called()


class TestUpdateCustomer:
    """Tests for CustomerService.update_customer."""

    @pytest.mark.asyncio
    async def test_empty_patch_is_validation_error(
        self, customer_service, mock_customer_repo, admin_credentials
    ):
        """An empty patch is rejected before any store call."""
        result = await customer_service.update_customer(
            admin_credentials, 9, CustomerPatch()
        )

        assert result.error.kind == ErrorKind.VALIDATION
        assert result.error.message == "input.patch requires at least 1 attribute"
        mock_customer_repo.update.assert_not_called()

    @pytest.mark.asyncio
    async def test_non_admin_rejected_before_validation(
        self, customer_service, mock_customer_repo, user_credentials
    ):
        result = await customer_service.update_customer(
            user_credentials, 9, CustomerPatch()
        )

        assert result.error.kind == ErrorKind.AUTHORIZATION
        mock_customer_repo.update.assert_not_called()

    @pytest.mark.asyncio
    async def test_comment_change_does_not_resync(
        self,
        customer_service,
        mock_customer_repo,
        mock_synchronizer,
        admin_credentials,
    ):
        updated = make_customer(9, "acme", comment="moved")
        mock_customer_repo.update.return_value = updated
        patch = CustomerPatch(comment="moved")

        result = await customer_service.update_customer(admin_credentials, 9, patch)

        assert result.ok
        assert result.value == updated
        mock_customer_repo.update.assert_awaited_once_with(9, patch)
        mock_synchronizer.resync.assert_not_called()

    @pytest.mark.asyncio
    async def test_rename_resyncs(
        self,
        customer_service,
        mock_customer_repo,
        mock_synchronizer,
        admin_credentials,
    ):
        mock_customer_repo.update.return_value = make_customer(9, "acme-two")

        result = await customer_service.update_customer(
            admin_credentials, 9, CustomerPatch(name="acme-two")
        )

        assert result.ok
        mock_synchronizer.resync.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_missing_customer_is_not_found(
        self,
        customer_service,
        mock_customer_repo,
        mock_synchronizer,
        admin_credentials,
    ):
        mock_customer_repo.update.return_value = None

        result = await customer_service.update_customer(
            admin_credentials, 9, CustomerPatch(name="acme-two")
        )

        assert result.error.kind == ErrorKind.NOT_FOUND
        mock_synchronizer.resync.assert_not_called()

    @pytest.mark.asyncio
    async def test_rename_to_existing_name_is_conflict(
        self, customer_service, mock_customer_repo, admin_credentials
    ):
        mock_customer_repo.update.side_effect = DuplicateCustomerNameError(
            "update", "globex"
        )

        result = await customer_service.update_customer(
            admin_credentials, 9, CustomerPatch(name="globex")
        )

        assert result.error.kind == ErrorKind.CONFLICT


class TestDeleteCustomer:
    """Tests for CustomerService.delete_customer."""

    @pytest.mark.asyncio
    async def test_delete_resyncs(
        self,
        customer_service,
        mock_customer_repo,
        mock_synchronizer,
        admin_credentials,
    ):
        result = await customer_service.delete_customer(admin_credentials, "acme")

        assert result.ok
        assert result.value == "acme"
        mock_customer_repo.delete.assert_awaited_once_with("acme")
        mock_synchronizer.resync.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_delete_unknown_name_is_not_found_without_resync(
        self,
        customer_service,
        mock_customer_repo,
        mock_synchronizer,
        admin_credentials,
    ):
        mock_customer_repo.delete.return_value = False

        result = await customer_service.delete_customer(admin_credentials, "ghost")

        assert result.error.kind == ErrorKind.NOT_FOUND
        assert "ghost" in result.error.message
        mock_synchronizer.resync.assert_not_called()

    @pytest.mark.asyncio
    async def test_non_admin_cannot_delete(
        self, customer_service, mock_customer_repo, user_credentials
    ):
        result = await customer_service.delete_customer(user_credentials, "acme")

        assert result.error.kind == ErrorKind.AUTHORIZATION
        mock_customer_repo.delete.assert_not_called()

    @pytest.mark.asyncio
    async def test_store_failure_skips_resync(
        self,
        customer_service,
        mock_customer_repo,
        mock_synchronizer,
        admin_credentials,
    ):
        mock_customer_repo.delete.side_effect = CustomerStoreError(
            "delete", "IntegrityError"
        )

        result = await customer_service.delete_customer(admin_credentials, "acme")

        assert result.error.kind == ErrorKind.STORE
        mock_synchronizer.resync.assert_not_called()


class TestDeleteAllCustomers:
    """Tests for CustomerService.delete_all_customers."""

    @pytest.mark.asyncio
    async def test_delete_all_returns_count_and_resyncs(
        self,
        customer_service,
        mock_customer_repo,
        mock_synchronizer,
        admin_credentials,
    ):
        mock_customer_repo.delete_all.return_value = 3

        result = await customer_service.delete_all_customers(admin_credentials)

        assert result.ok
        assert result.value == 3
        mock_synchronizer.resync.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_non_admin_cannot_delete_all(
        self, customer_service, mock_customer_repo, user_credentials
    ):
        result = await customer_service.delete_all_customers(user_credentials)

        assert result.error.kind == ErrorKind.AUTHORIZATION
        mock_customer_repo.delete_all.assert_not_called()


class TestResyncTenantIndex:
    """Tests for CustomerService.resync_tenant_index."""

    @pytest.mark.asyncio
    async def test_admin_resync_returns_mapping(
        self, customer_service, mock_synchronizer, admin_credentials
    ):
        result = await customer_service.resync_tenant_index(admin_credentials)

        assert result.ok
        assert result.value.as_dict() == {"acme": "RW", "admin_tenant": "RW"}

    @pytest.mark.asyncio
    async def test_resync_failure_is_sync_error(
        self, customer_service, mock_synchronizer, admin_credentials
    ):
        mock_synchronizer.resync.side_effect = TenantSyncError("unreachable")

        result = await customer_service.resync_tenant_index(admin_credentials)

        assert result.error.kind == ErrorKind.SYNC
        assert result.value is None

    @pytest.mark.asyncio
    async def test_non_admin_cannot_resync(
        self, customer_service, mock_synchronizer, user_credentials
    ):
        result = await customer_service.resync_tenant_index(user_credentials)

        assert result.error.kind == ErrorKind.AUTHORIZATION
        mock_synchronizer.resync.assert_not_called()
