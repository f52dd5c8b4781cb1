"""
错误处理单元测试
"""

import pytest

from floralgallery.core.errors import (
    ErrorSeverity,
    FloralGalleryError,
    ConfigurationError,
    ValidationError,
    PublicationError,
    LedgerRejected,
    UserDeclined,
    TransportError,
    PartialBatchFailure,
    Result,
    classify_ledger_failure,
)


class TestErrorSeverity:
    """ErrorSeverity 测试"""

    def test_severity_values(self):
        assert ErrorSeverity.WARNING.value == "warning"
        assert ErrorSeverity.ERROR.value == "error"
        assert ErrorSeverity.CRITICAL.value == "critical"


class TestFloralGalleryError:
    def test_error_str(self):
        err = FloralGalleryError(message="Test error", code="TEST")
        assert "[TEST] Test error" in str(err)

    def test_error_with_context(self):
        err = FloralGalleryError(message="Failed", context={"key": "value"})
        assert err.context == {"key": "value"}

    def test_can_be_raised_and_caught(self):
        with pytest.raises(FloralGalleryError) as info:
            raise ValidationError("bad input")
        assert info.value.message == "bad input"


class TestSpecificErrors:
    """特定错误类型测试"""

    @pytest.mark.parametrize(
        "cls, code",
        [
            (ConfigurationError, "CONFIGURATION_ERROR"),
            (ValidationError, "VALIDATION_ERROR"),
            (PublicationError, "PUBLICATION_ERROR"),
            (LedgerRejected, "LEDGER_REJECTED"),
            (UserDeclined, "USER_DECLINED"),
            (TransportError, "TRANSPORT_ERROR"),
        ],
    )
    def test_codes(self, cls, code):
        assert cls(message="x").code == code

    def test_user_declined_is_not_a_fault(self):
        err = UserDeclined(message="Action cancelled")
        assert err.severity == ErrorSeverity.WARNING
        assert err.is_fault is False

    def test_ledger_rejected_is_a_fault(self):
        assert LedgerRejected(message="no").is_fault is True

    def test_partial_batch_failure_keeps_progress(self):
        cause = LedgerRejected(message="Insufficient funds")
        err = PartialBatchFailure.after(2, 5, cause)

        assert err.completed == 2
        assert err.requested == 5
        assert err.cause is cause
        assert err.code == "PARTIAL_BATCH_FAILURE"
        assert err.severity == ErrorSeverity.CRITICAL
        assert "2 of 5" in err.message


class TestClassification:
    def test_wallet_rejection_code(self):
        assert isinstance(classify_ledger_failure(4001, "User rejected the request."), UserDeclined)

    def test_action_rejected_symbol(self):
        assert isinstance(classify_ledger_failure("ACTION_REJECTED", ""), UserDeclined)

    def test_insufficient_funds_text(self):
        err = classify_ledger_failure(-32000, "insufficient funds for gas * price + value")
        assert isinstance(err, LedgerRejected)
        assert "Insufficient funds" in err.message

    def test_revert_is_rejected(self):
        err = classify_ledger_failure("CALL_EXCEPTION", "execution reverted: not for sale", operation="purchase")
        assert isinstance(err, LedgerRejected)
        assert err.context["operation"] == "purchase"

    def test_nonce_conflict_is_rejected(self):
        assert isinstance(classify_ledger_failure(-32000, "nonce too low"), LedgerRejected)

    def test_timeout_is_transport(self):
        assert isinstance(classify_ledger_failure("TIMEOUT", "not in the chain after 600 seconds"), TransportError)

    def test_unknown_rpc_code_is_rejected(self):
        assert isinstance(classify_ledger_failure(-32099, "something odd"), LedgerRejected)

    def test_no_code_is_transport(self):
        assert isinstance(classify_ledger_failure(None, "boom"), TransportError)

    def test_numeric_string_code(self):
        assert isinstance(classify_ledger_failure("4001", ""), UserDeclined)


class TestResult:
    """Result 类型测试"""

    def test_ok_result(self):
        result = Result.ok(42)
        assert result.is_ok() is True
        assert result.unwrap() == 42
        assert result.error is None

    def test_err_result(self):
        err = FloralGalleryError(message="Failed")
        result = Result.err(err)
        assert result.is_ok() is False
        assert result.error is err

        with pytest.raises(FloralGalleryError):
            result.unwrap()

    def test_unwrap_or_returns_default(self):
        result = Result.err(FloralGalleryError(message="Failed"))
        assert result.unwrap_or("default") == "default"

    def test_map_transforms_ok(self):
        assert Result.ok(5).map(lambda x: x * 2).unwrap() == 10

    def test_map_preserves_err(self):
        result = Result.err(FloralGalleryError(message="Failed"))
        assert result.map(lambda x: x * 2).is_ok() is False
