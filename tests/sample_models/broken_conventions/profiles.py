from dataclasses import dataclass


class Profile:
    def __init__(self, name: str, age: int):
        self.name = name.upper()
        self.age = age

    def __eq__(self, other):
        if not isinstance(other, Profile):
            return NotImplemented
        return (self.name, self.age) == (other.name, other.age)

    def __hash__(self):
        return hash((self.name, self.age))


@dataclass(frozen=True, repr=False)
class Token:
    value: str

    def __repr__(self):
        return "Token(...)"


class Sensor:
    def __init__(self, reading: float):
        self._reading = reading

    @property
    def reading(self) -> float:
        return self._reading

    @reading.setter
    def reading(self, value: float) -> None:
        self._reading = abs(value) * 2

    def __eq__(self, other):
        if not isinstance(other, Sensor):
            return NotImplemented
        return self._reading == other._reading

    def __hash__(self):
        return hash(self._reading)

    def __repr__(self):
        return f"Sensor(reading={self._reading!r})"
