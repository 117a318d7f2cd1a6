from enum import Enum


class Status(Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"

    def get_label(self) -> str:
        return self.value.title()

    @property
    def code(self) -> str:
        return self.value[0].upper()

    def get_prefixed(self, prefix: str) -> str:
        return f"{prefix}{self.value}"

    def describe(self) -> None:
        return None


class Priority(str, Enum):
    LOW = "low"
    HIGH = "high"

    @property
    def weight(self) -> int:
        return 1 if self is Priority.LOW else 10
