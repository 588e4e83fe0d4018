from .models import Subunit
from .registry import UnitRegistry

__all__ = [
    "Subunit",
    "UnitRegistry",
]
