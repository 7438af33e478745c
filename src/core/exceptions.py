from core.constants import ErrorKind


class RewardError(Exception):
    """
    Base class for every expected, user-facing failure of the reward engine.

    The engine raises these before touching the store, so a caught error
    always means the user's rewards are unchanged. ``status_code`` is the
    HTTP status the API answers with, ``legacy_status_code`` the one older
    clients expect.
    """

    kind: ErrorKind
    default_message: str = "Reward operation failed"
    status_code: int = 400
    legacy_status_code: int = 400

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidDateError(RewardError):
    kind = ErrorKind.InvalidDateInput
    default_message = "Date is missing or is not a valid date"


class NoRecordError(RewardError):
    kind = ErrorKind.NoRecordFound
    default_message = "No reward found for this user to redeem"
    status_code = 404
    legacy_status_code = 404


class DateNotFoundError(RewardError):
    kind = ErrorKind.DateNotFoundForRedeem
    default_message = "No reward found for this date"
    status_code = 404
    legacy_status_code = 404


class FutureRedemptionError(RewardError):
    kind = ErrorKind.FutureRedemptionAttempt
    default_message = "Reward cannot be redeemed before it becomes available"
    status_code = 409
    legacy_status_code = 200


class ExpiredError(RewardError):
    kind = ErrorKind.RewardExpired
    default_message = "Reward has expired"
    status_code = 410
    legacy_status_code = 200


class AlreadyRedeemedError(RewardError):
    kind = ErrorKind.RewardAlreadyRedeemed
    default_message = "Reward has already been redeemed"
    status_code = 409
    legacy_status_code = 200
