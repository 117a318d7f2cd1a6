from dataclasses import dataclass


@dataclass(frozen=True)
class Counter:
    count: int

    def __hash__(self):
        return 0
