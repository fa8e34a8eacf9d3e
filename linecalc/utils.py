import enum
import math
from decimal import Decimal


class PrintableEnum(enum.Enum):
    def __str__(self) -> str:
        return self.name

    __repr__ = __str__


def format_number(value: float) -> str:
    """Decimal rendering of a float without exponent notation

    14.0 => 14, 12.5 => 12.5, 1e-07 => 0.0000001
    """
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    if value.is_integer():
        if value == 0 and math.copysign(1.0, value) < 0:
            return "-0"
        return str(int(value))
    # repr gives the shortest round-tripping digits, Decimal expands the exponent
    return format(Decimal(repr(value)), "f")
