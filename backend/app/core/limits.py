# app/core/limits.py

from app.core.tier import DefaultTier

# "no quota" sentinel returned for missing or disabled categories
UNLIMITED = -1

# Limit given to categories discovered by a catalog refresh
REFRESH_DEFAULT_LIMIT = 10

# Limit given to every category of a tier created without a copy source
NEW_TIER_DEFAULT_LIMIT = 10

# Synthesised when the persisted document is empty, in creation order
DEFAULT_TIER_LIMITS = {
    DefaultTier.DEFAULT: 50,
    DefaultTier.VIP: 500,
    DefaultTier.ADMIN: 2**31 - 2,
}

# Categories per page of the limits panel (3 rows of 9 icons)
ITEMS_PER_PAGE = 27
