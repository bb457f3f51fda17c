"""
Bound and type queries for decision variables.
"""

import pulp
from typing import Optional
from modeling.errors import InconsistentBoundDirection, NoBound
from utils.validation import ensure_numeric_bound


def has_lower_bound(var: pulp.LpVariable) -> bool:
    """Check if the variable has a lower bound."""
    return var.lowBound is not None


def has_upper_bound(var: pulp.LpVariable) -> bool:
    """Check if the variable has an upper bound."""
    return var.upBound is not None


def lower_bound(var: pulp.LpVariable) -> float:
    """
    Get the lower bound of a variable.

    Raises:
        NoBound: If the variable has no lower bound.
    """
    if var.lowBound is None:
        raise NoBound(f"Variable {var.name} does not have a lower bound")
    return var.lowBound


def upper_bound(var: pulp.LpVariable) -> float:
    """
    Get the upper bound of a variable.

    Raises:
        NoBound: If the variable has no upper bound.
    """
    if var.upBound is None:
        raise NoBound(f"Variable {var.name} does not have an upper bound")
    return var.upBound


def _check_direction(var: pulp.LpVariable, lower: Optional[float], upper: Optional[float]) -> None:
    if lower is not None and upper is not None and lower > upper:
        raise InconsistentBoundDirection(var.name, lower, upper)


def set_lower_bound(var: pulp.LpVariable, value: float) -> None:
    value = ensure_numeric_bound(value, "lower")
    _check_direction(var, value, var.upBound)
    var.lowBound = value


def set_upper_bound(var: pulp.LpVariable, value: float) -> None:
    value = ensure_numeric_bound(value, "upper")
    _check_direction(var, var.lowBound, value)
    var.upBound = value


def delete_lower_bound(var: pulp.LpVariable) -> None:
    if var.lowBound is None:
        raise NoBound(f"Variable {var.name} does not have a lower bound")
    var.lowBound = None


def delete_upper_bound(var: pulp.LpVariable) -> None:
    if var.upBound is None:
        raise NoBound(f"Variable {var.name} does not have an upper bound")
    var.upBound = None


def is_integer(var: pulp.LpVariable) -> bool:
    return var.cat in (pulp.LpInteger, pulp.LpBinary)


def is_binary(var: pulp.LpVariable) -> bool:
    """
    Check if the variable is restricted to {0, 1}.

    pulp stores binary variables as integer variables bounded by 0 and 1,
    so any such integer variable counts as binary.
    """
    if var.cat == pulp.LpBinary:
        return True
    return var.cat == pulp.LpInteger and var.lowBound == 0 and var.upBound == 1
