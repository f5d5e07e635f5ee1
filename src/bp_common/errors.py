"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: Auth/Permission
  2xxx: Account/Ledger
  3xxx: Market
  4xxx: Bet
  5xxx: Wallet request
  9xxx: System

Missing commission or odds configuration is deliberately NOT an error:
resolvers fall back to the defaults in config.settings and log it.
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


# --- 1xxx: Auth/Permission ---

class InvalidCredentialsError(AppError):
    def __init__(self) -> None:
        super().__init__(1001, "Invalid or expired token", 401)


class AccountBlockedError(AppError):
    def __init__(self, account_id: int) -> None:
        super().__init__(1002, f"Account {account_id} is blocked", 403)


class PermissionDeniedError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(1003, f"Permission denied: {detail}", 403)


# --- 2xxx: Account/Ledger ---

class InsufficientBalanceError(AppError):
    def __init__(self, account_id: int, required: int, available: int) -> None:
        self.account_id = account_id
        self.required = required
        self.available = available
        super().__init__(
            2001,
            f"Insufficient balance in account {account_id}: "
            f"required {required}, available {available}",
            422,
        )


class AccountNotFoundError(AppError):
    def __init__(self, account_id: int) -> None:
        super().__init__(2002, f"Account not found: {account_id}", 404)


class InvalidTransitionError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(2003, f"Invalid transition: {detail}", 422)


# --- 3xxx: Market ---

class MarketNotFoundError(AppError):
    def __init__(self, market_id: int) -> None:
        super().__init__(3001, f"Market not found: {market_id}", 404)


class InvalidResultError(AppError):
    def __init__(self, result: str, kind: str) -> None:
        super().__init__(3002, f"Invalid result {result!r} for {kind} market", 422)


# --- 4xxx: Bet ---

class UnknownModeError(AppError):
    """Bet mode or prediction the settlement rules cannot interpret.

    Rejected at placement; at settlement the bet is forced to a loss instead.
    """

    def __init__(self, mode: str, prediction: str, detail: str = "") -> None:
        self.mode = mode
        self.prediction = prediction
        msg = f"Cannot interpret prediction {prediction!r} for mode {mode!r}"
        if detail:
            msg = f"{msg}: {detail}"
        super().__init__(4001, msg, 422)


# --- 5xxx: Wallet request ---

class WalletRequestNotFoundError(AppError):
    def __init__(self, request_id: int) -> None:
        super().__init__(5001, f"Wallet request not found: {request_id}", 404)


# --- 9xxx: System ---

class RateLimitError(AppError):
    def __init__(self) -> None:
        super().__init__(9001, "Rate limit exceeded", 429)


class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9002, detail, 500)
