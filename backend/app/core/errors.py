# app/core/errors.py
from __future__ import annotations


class EntityLimitError(Exception):
    """Base class for errors reported back to the caller."""

    code = "entity_limit_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class TierNotFoundError(EntityLimitError):
    code = "tier_not_found"

    def __init__(self, name: str):
        super().__init__(f"Privilege '{name}' does not exist.")
        self.name = name


class CategoryNotFoundError(EntityLimitError):
    code = "category_not_found"

    def __init__(self, tier_name: str, category: str):
        super().__init__(f"Privilege '{tier_name}' has no entity '{category}'.")
        self.tier_name = tier_name
        self.category = category


class TierAlreadyExistsError(EntityLimitError):
    code = "tier_exists"

    def __init__(self, name: str):
        super().__init__(f"Privilege '{name}' already exists!")
        self.name = name


class InvalidTierNameError(EntityLimitError):
    code = "tier_name_invalid"

    def __init__(self, name: str, prefix: str):
        super().__init__(f"Privilege name '{name}' must start with '{prefix}'.")
        self.name = name


class PersistenceError(EntityLimitError):
    """The limit document could not be written; the change is not durable."""

    code = "persistence_failed"
