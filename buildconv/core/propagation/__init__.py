from .engine import propagate
from .resolved import DependencyTriple, FormatRule, PropagationResult, ResolvedConfiguration

__all__ = [
    "propagate",
    "DependencyTriple",
    "FormatRule",
    "PropagationResult",
    "ResolvedConfiguration",
]
