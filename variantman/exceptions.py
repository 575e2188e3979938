"""Variantman exceptions."""

from typing import Any


ERROR_MESSAGES = {
    "GROUP_NOT_FOUND": "Option group not found",
    "VALUE_NOT_FOUND": "Option value not found",
    "VALUE_UNAVAILABLE": "Option value is not selectable",
    "INVALID_COMBINATION": "Invalid combination",
    "PRODUCT_NOT_FOUND": "Product has no options",
    "STORAGE_UNSUPPORTED": "Storage backend cannot persist snapshots",
}


class VariantError(Exception):
    """
    Structured exception for variant operations.

    Raised for caller mistakes only (unknown ids, unselectable values,
    malformed combinations). Incomplete selections, empty option lists
    and duplicate variants are never errors.

    Usage:
        try:
            session.choose_value(size_id, "XXL")
        except VariantError as e:
            if e.code == "VALUE_NOT_FOUND":
                print(f"Value {e.value_id} does not exist")
    """

    def __init__(self, code: str, message: str = "", **data: Any) -> None:
        self.code = code
        self.message = message or ERROR_MESSAGES.get(code, code)
        self.data = data
        super().__init__(f"[{code}] {self.message}")

    @property
    def group_id(self) -> str | None:
        return self.data.get("group_id")

    @property
    def value_id(self) -> str | None:
        return self.data.get("value_id")

    def as_dict(self) -> dict:
        return {
            "code": self.code,
            "message": self.message,
            "data": self.data,
        }
