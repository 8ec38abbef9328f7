"""Domain errors raised by the services and mapped to HTTP codes by the API."""


class JournalError(Exception):
    """Base class for errors the API translates into client responses."""


class ValidationError(JournalError):
    """The request is well-formed but violates a business rule."""


class AccountRequiredError(ValidationError):
    def __init__(self):
        super().__init__("account_id is required")


class NotFoundError(JournalError):
    """The record does not exist or belongs to another user."""


class TradeNotFoundError(NotFoundError):
    def __init__(self, trade_id: int):
        super().__init__(f"Trade {trade_id} not found")
        self.trade_id = trade_id


class AccountNotFoundError(NotFoundError):
    def __init__(self, account_id: int):
        super().__init__(f"Account {account_id} not found")
        self.account_id = account_id


class StrategyNotFoundError(NotFoundError):
    def __init__(self, strategy_id: int):
        super().__init__(f"Strategy {strategy_id} not found")
        self.strategy_id = strategy_id


class EmailTakenError(ValidationError):
    def __init__(self, email: str):
        super().__init__(f"Email {email} is already registered")
