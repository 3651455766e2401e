"""Global enums: must match DB CHECK constraints exactly."""

from enum import Enum


class PaymentMode(str, Enum):
    CASH = "cash"
    CREDIT = "credit"


class SubscriptionStatus(str, Enum):
    TRIAL = "trial"
    ACTIVE = "active"
    EXPIRED = "expired"
    CANCELLED = "cancelled"


class AccessReason(str, Enum):
    """Why access was denied. Granted decisions carry no reason."""
    NO_SUBSCRIPTION = "no_subscription"
    TRIAL_EXPIRED = "trial_expired"
    SUBSCRIPTION_EXPIRED = "subscription_expired"
    EXPIRED = "expired"
    CANCELLED = "cancelled"


class PaymentMethod(str, Enum):
    ORANGE_MONEY = "orange_money"
    MTN_MONEY = "mtn_money"
    MOOV_MONEY = "moov_money"
    WAVE = "wave"
    MOBILE_MONEY = "mobile_money"  # provider webhook, operator unknown


class CommandType(str, Enum):
    """Command kinds emitted by the voice-command interpreter."""
    SALE = "vente"
    EXPENSE = "depense"
    NEW_CLIENT = "nouveau_client"
    ERROR = "erreur"
