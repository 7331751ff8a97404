"""Tests for the storage error decorator."""
import pytest

from sqlalchemy.exc import IntegrityError, OperationalError

from exceptions import ConstraintViolation, NotFoundError, StoreUnavailable
from storage.decorators import handle_store_errors


class TestHandleStoreErrors:
    """Tests for handle_store_errors."""

    @pytest.mark.asyncio
    async def test_returns_result_on_success(self):
        @handle_store_errors("op")
        async def succeed():
            return 42

        assert await succeed() == 42

    @pytest.mark.asyncio
    async def test_integrity_error_becomes_constraint_violation(self):
        @handle_store_errors("insert_tag")
        async def fail():
            raise IntegrityError("INSERT", {}, Exception("UNIQUE constraint failed"))

        with pytest.raises(ConstraintViolation) as exc_info:
            await fail()

        assert exc_info.value.to_error_string().startswith("ConstraintViolation: insert_tag")

    @pytest.mark.asyncio
    async def test_other_sqlalchemy_error_becomes_store_unavailable(self):
        @handle_store_errors("get_by_id")
        async def fail():
            raise OperationalError("SELECT", {}, Exception("database is locked"))

        with pytest.raises(StoreUnavailable):
            await fail()

    @pytest.mark.asyncio
    async def test_domain_errors_propagate_unchanged(self):
        @handle_store_errors("get_existing")
        async def fail():
            raise NotFoundError("missing")

        with pytest.raises(NotFoundError):
            await fail()
