from datetime import timedelta
import enum

# a reward can be claimed from availableAt until availableAt + 24h
REWARD_WINDOW = timedelta(hours=24)
DAYS_IN_WEEK = 7


class StoreBackend(str, enum.Enum):
    memory = "memory"
    database = "database"


# when ensure_week_populated stops walking the requested week
class EarlyExitPolicy(str, enum.Enum):
    first_record = "first_record"
    all_days = "all_days"


class ErrorKind(str, enum.Enum):
    InvalidDateInput = "InvalidDateInput"
    NoRecordFound = "NoRecordFound"
    DateNotFoundForRedeem = "DateNotFoundForRedeem"
    FutureRedemptionAttempt = "FutureRedemptionAttempt"
    RewardExpired = "RewardExpired"
    RewardAlreadyRedeemed = "RewardAlreadyRedeemed"
