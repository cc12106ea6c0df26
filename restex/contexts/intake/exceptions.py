"""Custom exceptions for the intake context."""

from typing import Optional


class MalformedInputError(ValueError):
    """
    Raised when raw resume input has no object at its root.

    A bare string, number, list or null cannot be turned into a resume model.
    Every other defect in the input degrades to empty fields instead.

    Attributes:
        message: Error description
        root_type: Python type name of the rejected root value
    """

    def __init__(self, message: str, root_type: Optional[str] = None):
        self.message = message
        self.root_type = root_type

        parts = [message]
        if root_type:
            parts.append(f"Root value type: {root_type}")

        super().__init__("\n".join(parts))


class OversizedInputError(ValueError):
    """
    Raised when raw resume input exceeds the configured size cap.

    Attributes:
        size_bytes: Size of the JSON serialization of the input
        max_bytes: Configured cap
    """

    def __init__(self, size_bytes: int, max_bytes: int):
        self.size_bytes = size_bytes
        self.max_bytes = max_bytes
        super().__init__(
            f"Resume input is {size_bytes} bytes, above the {max_bytes} byte limit"
        )
