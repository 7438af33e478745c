from .reward import ErrorDetail, ErrorResponse, RedeemedReward, Reward, Rewards
