# app/core/tier.py

import enum

TIER_PREFIX = "advancedentitylimit"


class DefaultTier(str, enum.Enum):
    DEFAULT = "advancedentitylimit.default"
    VIP = "advancedentitylimit.vip"
    ADMIN = "advancedentitylimit.admin"
