from enum import Enum

class Axis(Enum):
    HORIZONTAL = 0
    VERTICAL = 1

    @property
    def label(self) -> str:
        return "width" if self is Axis.HORIZONTAL else "height"
