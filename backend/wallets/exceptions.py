# wallets/exceptions.py
from rest_framework import status


class SettlementError(Exception):
    """
    Base for every rejection raised by the settlement layer.

    Raised before any write, or from inside an atomic block so that the
    block rolls back. Rendered by trading_app.exceptions.
    """

    code = "error"
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Request could not be settled"

    def __init__(self, message=None, fields=None):
        self.message = message or self.default_message
        self.fields = fields
        super().__init__(self.message)


class Unauthenticated(SettlementError):
    code = "unauthenticated"
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Authentication required"


class InvalidWager(SettlementError):
    code = "invalid_wager"
    default_message = "Invalid wager"


class InsufficientBalance(SettlementError):
    code = "insufficient_balance"
    default_message = "Insufficient balance"


class NotFound(SettlementError):
    code = "not_found"
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class AlreadySettled(SettlementError):
    code = "already_settled"
    status_code = status.HTTP_409_CONFLICT
    default_message = "Already settled"


class AlreadyOpened(SettlementError):
    code = "already_opened"
    status_code = status.HTTP_409_CONFLICT
    default_message = "Lootbox already opened"


class NotOwned(SettlementError):
    code = "not_owned"
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Lootbox not owned by user"


class Internal(SettlementError):
    code = "internal"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal error, nothing was settled"
