"""
Solution report models.
"""

import pandas as pd
from typing import List, Optional
from pydantic import BaseModel, Field
from modeling.errors import ModelingError
from modeling.model import Model, ResultStatus, TerminationStatus
from modeling.variables import is_integer
from utils.logging import setup_logger

logger = setup_logger(__name__)


class VariableValue(BaseModel):
    """
    Model for one variable in a solution.
    """

    name: str
    value: Optional[float] = None
    lower_bound: Optional[float] = None
    upper_bound: Optional[float] = None
    integer: bool = False


class ConstraintValue(BaseModel):
    """
    Model for one constraint in a solution.
    """

    name: str
    expression: str
    shadow_price: Optional[float] = None


class SolutionReport(BaseModel):
    """
    Model for the outcome of optimizing a model.
    """

    model: str
    termination_status: str
    primal_status: str
    dual_status: str
    objective_sense: str
    objective_value: Optional[float] = None
    variables: List[VariableValue] = Field(default_factory=list)
    constraints: List[ConstraintValue] = Field(default_factory=list)

    def to_frame(self) -> pd.DataFrame:
        """Variable values as a DataFrame indexed by variable name."""
        columns = list(VariableValue.model_fields)
        df = pd.DataFrame([v.model_dump() for v in self.variables], columns=columns)
        return df.set_index("name")


def summarize(model: Model) -> SolutionReport:
    """
    Build a report of a model's current solution.

    Values are only filled in when a primal solution exists, shadow prices
    only when a dual solution exists.

    Args:
        model: The model, optimized or not.

    Returns:
        SolutionReport: The report.
    """
    has_primal = model.primal_status is ResultStatus.FEASIBLE_POINT
    has_dual = model.dual_status is ResultStatus.FEASIBLE_POINT

    variables = [
        VariableValue(
            name=var.name,
            value=model.value(var) if has_primal else None,
            lower_bound=var.lowBound,
            upper_bound=var.upBound,
            integer=is_integer(var),
        )
        for var in model.variables()
    ]

    constraints = []
    for name, constraint in model.constraints():
        shadow_price = None
        if has_dual:
            try:
                shadow_price = model.shadow_price(constraint)
            except ModelingError as e:
                logger.warning(f"Skipping shadow price of {name}: {e}")
        constraints.append(
            ConstraintValue(name=name, expression=str(constraint), shadow_price=shadow_price)
        )

    report = SolutionReport(
        model=model.name,
        termination_status=model.termination_status.value,
        primal_status=model.primal_status.value,
        dual_status=model.dual_status.value,
        objective_sense=model.objective_sense.value,
        objective_value=model.objective_value if has_primal else None,
        variables=variables,
        constraints=constraints,
    )

    if model.termination_status is TerminationStatus.OPTIMIZE_NOT_CALLED:
        logger.debug(f"Summarized model {model.name!r} before optimizing")
    return report
