"""Tests for custom exception hierarchy."""

from lendbook.exceptions import (
    ConfigurationError,
    EntityNotFoundError,
    InvalidEntityStateError,
    LendbookError,
    ReferentialIntegrityError,
)


class TestExceptionHierarchy:
    """Test exception inheritance chain."""

    def test_lendbook_error_is_exception(self) -> None:
        assert isinstance(LendbookError("test"), Exception)

    def test_entity_not_found_is_lendbook_error(self) -> None:
        assert isinstance(EntityNotFoundError("test"), LendbookError)

    def test_referential_integrity_is_entity_not_found(self) -> None:
        err = ReferentialIntegrityError("test")
        assert isinstance(err, EntityNotFoundError)
        assert isinstance(err, LendbookError)

    def test_invalid_entity_state_is_lendbook_error(self) -> None:
        assert isinstance(InvalidEntityStateError("test"), LendbookError)

    def test_configuration_error_is_lendbook_error(self) -> None:
        assert isinstance(ConfigurationError("test"), LendbookError)

    def test_exception_message(self) -> None:
        err = ReferentialIntegrityError("Loan loan-001 not found")
        assert str(err) == "Loan loan-001 not found"
