"""Tests for econ_common.errors and econ_common.response."""

from src.econ_common.errors import (
    AccountNotFoundError,
    AppError,
    InsufficientBalanceError,
    InsufficientSharesError,
    LoanIneligibleError,
    UnsupportedPaymentTypeError,
)
from src.econ_common.response import (
    ApiResponse,
    OperationResult,
    error_response,
    result_response,
    success_response,
)


class TestAppError:
    def test_base_error(self) -> None:
        err = AppError(code=9002, message="Internal error")
        assert err.code == 9002
        assert err.message == "Internal error"
        assert err.http_status == 500

    def test_custom_http_status(self) -> None:
        err = AppError(code=1001, message="bad", http_status=422)
        assert err.http_status == 422

    def test_is_exception(self) -> None:
        assert isinstance(AppError(code=1001, message="test"), Exception)


class TestSpecificErrors:
    def test_insufficient_balance(self) -> None:
        err = InsufficientBalanceError(required=6500, available=3000)
        assert err.code == 2001
        assert err.http_status == 422
        assert "6500" in err.message
        assert "3000" in err.message

    def test_account_not_found(self) -> None:
        err = AccountNotFoundError("char-1")
        assert err.code == 2002
        assert err.http_status == 404
        assert "char-1" in err.message

    def test_loan_ineligible(self) -> None:
        err = LoanIneligibleError("credit score too low")
        assert err.code == 3002
        assert "credit score too low" in err.message

    def test_insufficient_shares(self) -> None:
        err = InsufficientSharesError(requested=10, owned=3)
        assert err.code == 5002
        assert err.http_status == 422

    def test_unsupported_payment_type(self) -> None:
        err = UnsupportedPaymentTypeError("BARTER")
        assert err.code == 7002
        assert "BARTER" in err.message


class TestOperationResult:
    def test_ok(self) -> None:
        result = OperationResult.ok("done", {"x": 1})
        assert result.success is True
        assert result.code == 0
        assert result.data == {"x": 1}
        assert result.http_status == 200

    def test_failure_carries_error(self) -> None:
        result = OperationResult.failure(InsufficientBalanceError(500, 100))
        assert result.success is False
        assert result.code == 2001
        assert result.http_status == 422
        assert result.data is None

    def test_http_status_excluded_from_dump(self) -> None:
        assert "http_status" not in OperationResult.ok("done").model_dump()


class TestApiResponse:
    def test_success(self) -> None:
        resp = success_response({"id": "abc"})
        assert resp.code == 0
        assert resp.message == "success"
        assert resp.data == {"id": "abc"}

    def test_error(self) -> None:
        resp = error_response(2001, "Insufficient balance")
        assert resp.code == 2001
        assert resp.data is None

    def test_serialization(self) -> None:
        d = success_response({"price": 65}).model_dump()
        for key in ("code", "message", "data", "timestamp", "request_id"):
            assert key in d

    def test_result_response_success_keeps_message(self) -> None:
        resp = result_response(OperationResult.ok("Deposited 1.00g", 5), request_id="req_x")
        assert isinstance(resp, ApiResponse)
        assert resp.message == "Deposited 1.00g"
        assert resp.data == 5
        assert resp.request_id == "req_x"

    def test_result_response_failure(self) -> None:
        resp = result_response(OperationResult.failure(AccountNotFoundError("c")))
        assert resp.code == 2002
        assert resp.data is None
