"""
Typed errors raised by the store and the inventory services.

    InventoryError (base)
    |
    +-- ValidationError      bad input, insufficient stock, duplicate username
    +-- NotFoundError        item, transaction or user absent
    +-- CredentialsInvalid   login failure
    +-- StoreUnavailable     database failed to initialize or respond

Every error carries a machine-readable ``code`` and a user-facing ``message``.
"""


class InventoryError(Exception):
    code: str = "INVENTORY_ERROR"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ValidationError(InventoryError):
    code = "VALIDATION_ERROR"

    def __init__(self, message: str, field: str = None):
        self.field = field
        super().__init__(message)


class NotFoundError(InventoryError):
    code = "NOT_FOUND"

    def __init__(self, entity: str, key: str):
        self.entity = entity
        self.key = key
        super().__init__(f"{entity} {key} not found")


class CredentialsInvalid(InventoryError):
    code = "CREDENTIALS_INVALID"

    def __init__(self, message: str = "Invalid username or password"):
        super().__init__(message)


class StoreUnavailable(InventoryError):
    code = "STORE_UNAVAILABLE"
