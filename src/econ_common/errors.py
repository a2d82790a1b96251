"""Unified error codes and custom exceptions for the economy engine.

Error code ranges:
  1xxx: Validation
  2xxx: Account / ledger
  3xxx: Loan
  4xxx: Investment
  5xxx: Market
  6xxx: World events
  7xxx: Supply / services
  9xxx: System

Business-rule errors (validation, eligibility, not-found) are raised inside a
transactional unit and converted into an ``OperationResult`` failure by the
application service. Anything that is not an ``AppError`` is a system fault.
"""


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        super().__init__(message)


# --- 1xxx: Validation ---

class InvalidAmountError(AppError):
    def __init__(self, field: str = "amount") -> None:
        super().__init__(1001, f"{field} must be greater than 0", 422)


class AmountOutOfRangeError(AppError):
    def __init__(self, amount: int, minimum: int, maximum: int) -> None:
        super().__init__(
            1002,
            f"Amount {amount} outside allowed range [{minimum}, {maximum}] cents",
            422,
        )


class InvalidParameterError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(1003, f"Invalid parameter: {detail}", 422)


# --- 2xxx: Account / ledger ---

class InsufficientBalanceError(AppError):
    def __init__(self, required: int, available: int) -> None:
        super().__init__(
            2001,
            f"Insufficient balance: required {required} cents, available {available} cents",
            422,
        )


class AccountNotFoundError(AppError):
    def __init__(self, character_id: str) -> None:
        super().__init__(2002, f"Bank account not found for character {character_id}", 404)


class AccountExistsError(AppError):
    def __init__(self, character_id: str) -> None:
        super().__init__(2003, f"Character {character_id} already has a bank account", 409)


class AccountNotActiveError(AppError):
    def __init__(self, character_id: str, status: str) -> None:
        super().__init__(2004, f"Account for {character_id} is {status}", 422)


class CharacterNotFoundError(AppError):
    def __init__(self, character_id: str) -> None:
        super().__init__(2005, f"Character not found: {character_id}", 404)


class AccountNotClosableError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(2006, f"Account cannot be closed: {detail}", 422)


# --- 3xxx: Loan ---

class LoanNotFoundError(AppError):
    def __init__(self, loan_id: str) -> None:
        super().__init__(3001, f"Active loan not found: {loan_id}", 404)


class LoanIneligibleError(AppError):
    def __init__(self, reason: str) -> None:
        super().__init__(3002, f"Loan application rejected: {reason}", 422)


# --- 4xxx: Investment ---

class ProductNotFoundError(AppError):
    def __init__(self, product_id: str) -> None:
        super().__init__(4001, f"Investment product not found: {product_id}", 404)


class InvestmentNotFoundError(AppError):
    def __init__(self, investment_id: str) -> None:
        super().__init__(4002, f"Active investment not found: {investment_id}", 404)


class ProductIneligibleError(AppError):
    def __init__(self, reason: str) -> None:
        super().__init__(4003, f"Not eligible for product: {reason}", 422)


# --- 5xxx: Market ---

class CompanyNotFoundError(AppError):
    def __init__(self, company_id: str) -> None:
        super().__init__(5001, f"Company not found or not trading: {company_id}", 404)


class InsufficientSharesError(AppError):
    def __init__(self, requested: int, owned: int) -> None:
        super().__init__(
            5002,
            f"Insufficient shares: requested {requested}, owned {owned}",
            422,
        )


# --- 6xxx: World events ---

class EventTemplateNotFoundError(AppError):
    def __init__(self, event_type: str) -> None:
        super().__init__(6001, f"No event template for type {event_type}", 404)


# --- 7xxx: Supply / services ---

class SupplierNotFoundError(AppError):
    def __init__(self, supplier_id: str) -> None:
        super().__init__(7001, f"Supplier not found: {supplier_id}", 404)


class UnsupportedPaymentTypeError(AppError):
    def __init__(self, payment_type: str) -> None:
        super().__init__(7002, f"Unsupported payment type: {payment_type}", 422)


class PaymentIneligibleError(AppError):
    def __init__(self, reason: str) -> None:
        super().__init__(7003, f"Payment option not available: {reason}", 422)


# --- 9xxx: System ---

class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9002, detail, 500)
