"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: Auth/Merchant
  2xxx: Ledger (clients, sales, payments, expenses)
  3xxx: Subscription
  4xxx: Commands
  9xxx: System

Every error carries a stable ``kind`` string. The API layer copies it into the
response envelope so callers can branch on the kind rather than on the message.
"""


class AppError(Exception):
    """Base application error."""

    kind: str = "APP_ERROR"
    data: dict[str, object] | None = None  # extra machine-readable detail for the envelope

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


# --- 1xxx: Auth/Merchant ---

class PhoneExistsError(AppError):
    kind = "PHONE_EXISTS"

    def __init__(self) -> None:
        super().__init__(1001, "Phone number already registered", 409)


class EmailExistsError(AppError):
    kind = "EMAIL_EXISTS"

    def __init__(self) -> None:
        super().__init__(1002, "Email already exists", 409)


class InvalidCredentialsError(AppError):
    kind = "INVALID_CREDENTIALS"

    def __init__(self) -> None:
        super().__init__(1003, "Invalid phone number or password", 401)


class AccountDisabledError(AppError):
    kind = "ACCOUNT_DISABLED"

    def __init__(self) -> None:
        super().__init__(1004, "Account is disabled", 403)


class InvalidRefreshTokenError(AppError):
    kind = "INVALID_REFRESH_TOKEN"

    def __init__(self) -> None:
        super().__init__(1005, "Refresh token is invalid or expired", 401)


# --- 2xxx: Ledger ---

class ClientNotFoundError(AppError):
    kind = "CLIENT_NOT_FOUND"

    def __init__(self, client_ref: str, hint: str | None = None) -> None:
        message = f"Client not found: {client_ref}"
        if hint:
            message = f"{message}. {hint}"
        super().__init__(2001, message, 404)


class DuplicateClientError(AppError):
    kind = "DUPLICATE_CLIENT"

    def __init__(self, name: str) -> None:
        super().__init__(
            2002,
            f'Client "{name}" already exists. Use it directly for credit sales.',
            409,
        )


class OverpaymentRejectedError(AppError):
    kind = "OVERPAYMENT_REJECTED"

    def __init__(self, amount: int, available: int) -> None:
        self.data = {"amount": amount, "available": available}
        super().__init__(
            2003,
            f"Payment of {amount} F exceeds the client's outstanding credit of {available} F",
            422,
        )


class OutstandingBalanceError(AppError):
    kind = "OUTSTANDING_BALANCE"

    def __init__(self, client_id: str, total_credit: int) -> None:
        super().__init__(
            2004,
            f"Client {client_id} still owes {total_credit} F and cannot be deleted",
            409,
        )


class SaleNotFoundError(AppError):
    kind = "SALE_NOT_FOUND"

    def __init__(self, sale_id: str) -> None:
        super().__init__(2005, f"Sale not found: {sale_id}", 404)


class ExpenseNotFoundError(AppError):
    kind = "EXPENSE_NOT_FOUND"

    def __init__(self, expense_id: str) -> None:
        super().__init__(2006, f"Expense not found: {expense_id}", 404)


# --- 3xxx: Subscription ---

class InvalidPlanError(AppError):
    kind = "INVALID_PLAN"

    def __init__(self, plan: str, available: list[str]) -> None:
        super().__init__(
            3001,
            f"Invalid plan: {plan}. Available plans: {', '.join(available)}",
            422,
        )


class NoPriorPlanError(AppError):
    kind = "NO_PRIOR_PLAN"

    def __init__(self) -> None:
        super().__init__(3002, "No previous subscription plan to renew", 422)


class SubscriptionNotFoundError(AppError):
    kind = "SUBSCRIPTION_NOT_FOUND"

    def __init__(self, account_id: str) -> None:
        super().__init__(3003, f"No subscription for account {account_id}", 404)


class SubscriptionExistsError(AppError):
    kind = "SUBSCRIPTION_EXISTS"

    def __init__(self, account_id: str) -> None:
        super().__init__(3004, f"Subscription already exists for account {account_id}", 409)


class SubscriptionCancelledError(AppError):
    kind = "SUBSCRIPTION_CANCELLED"

    def __init__(self, account_id: str) -> None:
        super().__init__(3005, f"Subscription for account {account_id} is cancelled", 409)


class SubscriptionRequiredError(AppError):
    kind = "SUBSCRIPTION_REQUIRED"

    def __init__(self, reason: str, message: str) -> None:
        self.reason = reason
        self.data = {"reason": reason}
        super().__init__(3006, message, 402)


# --- 4xxx: Commands ---

class CommandRejectedError(AppError):
    kind = "COMMAND_REJECTED"

    def __init__(self, reason: str) -> None:
        super().__init__(4001, reason, 422)


# --- 9xxx: System ---

class ValidationError(AppError):
    kind = "VALIDATION_ERROR"

    def __init__(self, detail: str) -> None:
        super().__init__(9001, detail, 422)


class ConsistencyError(AppError):
    """Stored aggregate disagrees with its defining transactions. Indicates a bug."""

    kind = "CONSISTENCY_ERROR"

    def __init__(self, detail: str) -> None:
        super().__init__(9002, f"Ledger consistency violation: {detail}", 500)


class InternalError(AppError):
    kind = "INTERNAL_ERROR"

    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9003, detail, 500)
