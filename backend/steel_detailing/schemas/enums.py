from enum import Enum


class Face(str, Enum):
    TOP = "top"
    BOTTOM = "bottom"


class SteelKind(str, Enum):
    CONTINUOUS = "continuous"
    HOOK = "hook"
    DEVELOPMENT = "development"


class BarGroup(str, Enum):
    """Acero corrido o una de las dos líneas de bastones."""

    MAIN = "main"
    L1 = "l1"
    L2 = "l2"


class Zone(str, Enum):
    Z1 = "z1"
    Z2 = "z2"
    Z3 = "z3"


class SupportType(str, Enum):
    COLUMNA_INFERIOR = "columna_inferior"
    COLUMNA_SUPERIOR = "columna_superior"
    PLACA = "placa"
    APOYO_INTERMEDIO = "apoyo_intermedio"
    NINGUNO = "ninguno"
