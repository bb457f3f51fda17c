"""
Model facade over pulp.

Declares scalar and indexed variables and constraints, sets the objective,
solves with a configurable pulp solver and answers solution queries. All
expression arithmetic and the solving itself are pulp's.
"""

import re
import numbers
import operator
import pulp
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple, Union
from config.config import config
from modeling.containers import Bounds, IndexFunction, IndexSpec, ResolvedContainer, resolve, span
from modeling.containers.index import index_names, prepare_specs, scope_of
from modeling.errors import (
    DimensionMismatch,
    DuplicateName,
    InconsistentBoundDirection,
    ModelingError,
    OptimizeNotCalled,
)
from utils.logging import setup_logger
from utils.validation import ensure_numeric_bound, validate_matrix_shape

logger = setup_logger(__name__)

# Characters pulp rewrites in element names
_ILLEGAL_NAME_CHARS = re.compile(r"[-+\[\] >/]")

_COMPARISONS = {
    "==": operator.eq,
    "<=": operator.le,
    ">=": operator.ge,
}


class Sense(Enum):
    """Objective sense."""

    MIN = "Min"
    MAX = "Max"

    @classmethod
    def parse(cls, value: Any) -> "Sense":
        if isinstance(value, Sense):
            return value
        if value == pulp.LpMinimize:
            return cls.MIN
        if value == pulp.LpMaximize:
            return cls.MAX
        if isinstance(value, str):
            key = value.strip().lower()
            if key in ("min", "minimize", "minimise"):
                return cls.MIN
            if key in ("max", "maximize", "maximise"):
                return cls.MAX
        raise ValueError(f"Unknown objective sense: {value!r}")

    @property
    def pulp_sense(self) -> int:
        return pulp.LpMinimize if self is Sense.MIN else pulp.LpMaximize


class TerminationStatus(Enum):
    """Why the solver stopped."""

    OPTIMIZE_NOT_CALLED = "OPTIMIZE_NOT_CALLED"
    OPTIMAL = "OPTIMAL"
    INFEASIBLE = "INFEASIBLE"
    DUAL_INFEASIBLE = "DUAL_INFEASIBLE"
    OTHER_LIMIT = "OTHER_LIMIT"
    OTHER_ERROR = "OTHER_ERROR"


class ResultStatus(Enum):
    """Whether a primal or dual solution is available."""

    NO_SOLUTION = "NO_SOLUTION"
    FEASIBLE_POINT = "FEASIBLE_POINT"


def _sanitize(name: str) -> str:
    return _ILLEGAL_NAME_CHARS.sub("_", name)


def _entry_name(base: str, key: Tuple[Any, ...]) -> str:
    return _sanitize("_".join([base] + [str(label) for label in key]))


def _as_expression(expr: Any) -> pulp.LpAffineExpression:
    if isinstance(expr, pulp.LpConstraint):
        raise TypeError("Expected an expression, got a constraint")
    if isinstance(expr, (pulp.LpAffineExpression, pulp.LpVariable)) or (
        isinstance(expr, numbers.Real) and not isinstance(expr, bool)
    ):
        return pulp.lpSum([expr])
    raise TypeError(f"Expected a linear expression, got {type(expr).__name__}")


class Model:
    """
    A linear or mixed-integer optimization model.

    Variables and constraints are registered under unique names. Indexed
    declarations go through :func:`modeling.containers.resolve`, so their
    containers are dense arrays, axis arrays or sparse mappings depending on
    the shape of the indices.
    """

    def __init__(self, name: Optional[str] = None, solver: Optional[str] = None):
        """
        Initialize the model.

        Args:
            name: Model name. Defaults to the ``model.default_name`` setting.
            solver: pulp solver name (see ``pulp.listSolvers()``). Defaults to
                the ``solver.name`` setting.
        """
        self.name = name or config.get_model_name()
        self.problem = pulp.LpProblem(name=_sanitize(self.name), sense=pulp.LpMinimize)

        solver_config = config.get_solver_config()
        self.solver_name = solver or solver_config["name"]
        self.solver_msg = bool(solver_config["msg"])
        self.time_limit = solver_config["time_limit"]

        self._objects: Dict[str, Any] = {}
        self._element_names: set = set()
        self._variables: List[pulp.LpVariable] = []
        self._anonymous_count = 0
        self._status: Optional[int] = None
        self._sol_status: Optional[int] = None

        logger.debug(f"Created model {self.name!r} with solver {self.solver_name}")

    # Registration

    def _claim(self, name: str) -> str:
        if name in self._element_names:
            raise DuplicateName(f"An element named {name!r} already exists in model {self.name!r}")
        self._element_names.add(name)
        return name

    def _plan_entry_names(self, base: str, keys: Iterable[Tuple[Any, ...]]) -> Dict[Tuple[Any, ...], str]:
        """
        Choose the element name of every entry of a declaration up front.

        Keys whose joined labels coincide (``("a_b", "c")`` and
        ``("a", "b_c")``) get a numeric suffix in key order.

        Raises:
            DuplicateName: A planned name is already used in the model.
        """
        planned: Dict[Tuple[Any, ...], str] = {}
        taken = set()
        for key in keys:
            candidate = element = _entry_name(base, key)
            suffix = 1
            while element in taken:
                suffix += 1
                element = f"{candidate}_{suffix}"
            taken.add(element)
            planned[key] = element

        clashes = sorted(taken & self._element_names)
        if clashes:
            raise DuplicateName(
                f"An element named {clashes[0]!r} already exists in model {self.name!r}"
            )
        return planned

    def _register(self, name: str, obj: Any) -> None:
        if name in self._objects:
            raise DuplicateName(f"An object named {name!r} already exists in model {self.name!r}")
        self._objects[name] = obj

    def _next_anonymous(self, prefix: str) -> str:
        self._anonymous_count += 1
        return f"{prefix}{self._anonymous_count}"

    def __getitem__(self, name: str) -> Any:
        """Look up a registered variable, constraint or container by name."""
        try:
            return self._objects[name]
        except KeyError:
            raise KeyError(f"No object named {name!r} in model {self.name!r}") from None

    def __contains__(self, name: str) -> bool:
        return name in self._objects

    def _new_variable(
        self, name: str, bounds: Bounds, integer: bool, binary: bool
    ) -> pulp.LpVariable:
        name = self._claim(_sanitize(name))
        if binary:
            var = pulp.LpVariable(name, cat=pulp.LpBinary)
            # Explicit bounds tighten the implied [0, 1]
            if bounds.lower is not None:
                var.lowBound = max(0, bounds.lower)
            if bounds.upper is not None:
                var.upBound = min(1, bounds.upper)
        else:
            var = pulp.LpVariable(
                name,
                lowBound=bounds.lower,
                upBound=bounds.upper,
                cat=pulp.LpInteger if integer else pulp.LpContinuous,
            )
        self.problem.addVariable(var)
        self._variables.append(var)
        return var

    # Variables

    def add_variable(
        self,
        name: str,
        lower_bound: Optional[float] = None,
        upper_bound: Optional[float] = None,
        integer: bool = False,
        binary: bool = False,
    ) -> pulp.LpVariable:
        """
        Add a scalar variable.

        Args:
            name: Variable name, unique in the model.
            lower_bound: Lower bound, None for free below.
            upper_bound: Upper bound, None for free above.
            integer: Restrict to integer values.
            binary: Restrict to {0, 1}.

        Returns:
            pulp.LpVariable: The new variable.
        """
        if name in self._objects:
            raise DuplicateName(f"An object named {name!r} already exists in model {self.name!r}")
        if integer and binary:
            raise ModelingError(f"Variable {name!r} cannot be both integer and binary")

        bounds = Bounds(
            ensure_numeric_bound(lower_bound, "lower"),
            ensure_numeric_bound(upper_bound, "upper"),
        )
        if bounds.lower is not None and bounds.upper is not None and bounds.lower > bounds.upper:
            raise InconsistentBoundDirection((name,), bounds.lower, bounds.upper)

        var = self._new_variable(name, bounds, integer, binary)
        self._register(name, var)
        return var

    def add_variables(
        self,
        name: str,
        *indices: Any,
        condition=None,
        lower_bound: Any = None,
        upper_bound: Any = None,
        integer: bool = False,
        binary: bool = False,
    ) -> ResolvedContainer:
        """
        Add an indexed collection of variables.

        Args:
            name: Base name; entries are named ``name_<labels>``.
            *indices: The axes, as ``IndexSpec`` objects or plain domains.
            condition: Filter over index names; makes the container sparse.
            lower_bound: Constant or function of index names.
            upper_bound: Constant or function of index names.
            integer: Restrict to integer values.
            binary: Restrict to {0, 1}.

        Returns:
            ResolvedContainer: Variables keyed by index tuple.
        """
        if integer and binary:
            raise ModelingError(f"Variables {name!r} cannot be both integer and binary")
        if name in self._objects:
            raise DuplicateName(f"An object named {name!r} already exists in model {self.name!r}")

        # Resolve bounds and names first so a failing declaration adds nothing
        declared = resolve(indices, condition=condition, lower=lower_bound, upper=upper_bound)
        elements = self._plan_entry_names(name, declared.keys())
        container = declared.map_items(
            lambda key, bounds: self._new_variable(elements[key], bounds, integer, binary)
        )
        self._register(name, container)
        logger.info(f"Added {len(container)} variables {name!r} as {container.kind.value}")
        return container

    # Constraints

    def add_constraint(self, constraint: Any, name: Optional[str] = None) -> pulp.LpConstraint:
        """
        Add a single constraint.

        Args:
            constraint: A pulp constraint, e.g. ``6 * x + 8 * y >= 100``.
            name: Constraint name; generated when omitted.

        Returns:
            pulp.LpConstraint: The registered constraint.
        """
        if name and name in self._objects:
            raise DuplicateName(f"An object named {name!r} already exists in model {self.name!r}")

        registered = self._add_constraint_element(
            constraint, _sanitize(name) if name else self._next_anonymous("_c")
        )
        if name:
            self._register(name, registered)
        return registered

    def _add_constraint_element(self, constraint: Any, element: str) -> pulp.LpConstraint:
        if not isinstance(constraint, pulp.LpConstraint):
            raise TypeError(
                f"Expected a constraint such as 'x + y <= 1', got {type(constraint).__name__}"
            )
        self._claim(element)
        self.problem.addConstraint(constraint, element)
        return self.problem.constraints[element]

    def add_constraints(
        self, name: Optional[str], *indices: Any, rule, condition=None
    ) -> ResolvedContainer:
        """
        Add an indexed collection of constraints.

        Args:
            name: Base name, or None for an anonymous collection.
            *indices: The axes, as ``IndexSpec`` objects or plain domains.
            rule: Function of index names returning a pulp constraint.
            condition: Filter over index names; makes the container sparse.

        Returns:
            ResolvedContainer: Constraints keyed by index tuple.
        """
        if name is not None and name in self._objects:
            raise DuplicateName(f"An object named {name!r} already exists in model {self.name!r}")

        specs = prepare_specs(indices)
        rule_fn = IndexFunction(rule, index_names(specs), role="constraint rule")
        base = name or self._next_anonymous("_c")

        def build(key, bounds):
            constraint = rule_fn(scope_of(specs, key))
            if not isinstance(constraint, pulp.LpConstraint):
                raise TypeError(
                    f"Constraint rule for {base!r} at index {key} returned "
                    f"{type(constraint).__name__}, expected a constraint"
                )
            return constraint

        declared = resolve(specs, condition=condition, build=build)
        elements = self._plan_entry_names(base, declared.keys())
        container = declared.map_items(
            lambda key, constraint: self._add_constraint_element(constraint, elements[key])
        )
        if name is not None:
            self._register(name, container)
        logger.info(f"Added {len(container)} constraints {base!r} as {container.kind.value}")
        return container

    def add_matrix_constraints(
        self, name: Optional[str], matrix: Any, x: Any, rhs: Any, sense: str = "=="
    ) -> ResolvedContainer:
        """
        Add the rows of ``A x (sense) b``.

        Args:
            name: Base name, or None for an anonymous collection.
            matrix: Coefficient matrix with one column per variable.
            x: Variables, a container (in key order) or a sequence.
            rhs: Right hand side with one entry per row.
            sense: One of "==", "<=", ">=".

        Returns:
            ResolvedContainer: One constraint per row, keyed 1..m.
        """
        if sense not in _COMPARISONS:
            raise ValueError(f"Unknown constraint sense {sense!r}, expected one of {list(_COMPARISONS)}")

        variables = list(x.values()) if isinstance(x, ResolvedContainer) else list(x)
        a_mat, b_vec = validate_matrix_shape(matrix, len(variables), rhs)
        compare = _COMPARISONS[sense]

        def row_constraint(row):
            expr = pulp.lpSum(
                float(coef) * var for coef, var in zip(a_mat[row - 1], variables) if coef != 0
            )
            return compare(expr, float(b_vec[row - 1]))

        return self.add_constraints(name, IndexSpec("row", span(1, a_mat.shape[0])), rule=row_constraint)

    # Objective

    def set_objective_sense(self, sense: Any) -> None:
        self.problem.sense = Sense.parse(sense).pulp_sense

    def set_objective_function(self, expr: Any) -> None:
        self.problem.setObjective(_as_expression(expr))

    def set_objective(self, sense: Any, expr: Any) -> None:
        """Set both the objective sense ("min"/"max") and function."""
        self.set_objective_sense(sense)
        self.set_objective_function(expr)

    @property
    def objective_sense(self) -> Sense:
        return Sense.parse(self.problem.sense)

    @property
    def objective_function(self) -> pulp.LpAffineExpression:
        if self.problem.objective is None:
            return pulp.LpAffineExpression()
        return self.problem.objective

    @property
    def objective_function_type(self) -> type:
        """Class of the objective expression, ``pulp.LpAffineExpression`` for linear models."""
        return type(self.objective_function)

    # Solving

    def _make_solver(self):
        kwargs = {"msg": self.solver_msg}
        if self.time_limit is not None:
            kwargs["timeLimit"] = self.time_limit
        try:
            solver = pulp.getSolver(self.solver_name, **kwargs)
        except pulp.PulpSolverError as e:
            raise ModelingError(f"Unknown solver {self.solver_name!r}: {e}") from e
        if not solver.available():
            raise ModelingError(f"Solver {self.solver_name!r} is not available")
        return solver

    def optimize(self) -> TerminationStatus:
        """
        Solve the model.

        Returns:
            TerminationStatus: Why the solver stopped.
        """
        if self.problem.objective is None:
            self.problem.setObjective(pulp.LpAffineExpression())

        solver = self._make_solver()
        logger.info(
            f"Optimizing model {self.name!r}: {len(self._variables)} variables, "
            f"{len(self.problem.constraints)} constraints, solver {self.solver_name}"
        )

        try:
            self._status = self.problem.solve(solver)
        except pulp.PulpSolverError as e:
            raise ModelingError(f"Solver {self.solver_name!r} failed: {e}") from e
        self._sol_status = getattr(self.problem, "sol_status", None)

        status = self.termination_status
        if status is TerminationStatus.OPTIMAL:
            logger.info(f"Model {self.name!r} solved to optimality")
        else:
            logger.warning(
                f"Model {self.name!r} finished with status: {pulp.LpStatus[self._status]}"
            )
        return status

    @property
    def termination_status(self) -> TerminationStatus:
        if self._status is None:
            return TerminationStatus.OPTIMIZE_NOT_CALLED
        if self._sol_status == pulp.LpSolutionIntegerFeasible:
            return TerminationStatus.OTHER_LIMIT
        if self._status == pulp.LpStatusOptimal:
            return TerminationStatus.OPTIMAL
        if self._status == pulp.LpStatusInfeasible:
            return TerminationStatus.INFEASIBLE
        if self._status == pulp.LpStatusUnbounded:
            return TerminationStatus.DUAL_INFEASIBLE
        if self._status == pulp.LpStatusNotSolved:
            return TerminationStatus.OTHER_LIMIT
        return TerminationStatus.OTHER_ERROR

    @property
    def primal_status(self) -> ResultStatus:
        if self.termination_status is TerminationStatus.OPTIMAL or self._sol_status in (
            pulp.LpSolutionOptimal,
            pulp.LpSolutionIntegerFeasible,
        ):
            return ResultStatus.FEASIBLE_POINT
        return ResultStatus.NO_SOLUTION

    @property
    def dual_status(self) -> ResultStatus:
        if self.termination_status is TerminationStatus.OPTIMAL and not self.is_mip():
            return ResultStatus.FEASIBLE_POINT
        return ResultStatus.NO_SOLUTION

    def is_mip(self) -> bool:
        return any(var.cat in (pulp.LpInteger, pulp.LpBinary) for var in self._variables)

    def _require_solution(self) -> None:
        if self._status is None:
            raise OptimizeNotCalled(f"Model {self.name!r} has not been optimized")
        if self.primal_status is ResultStatus.NO_SOLUTION:
            raise ModelingError(
                f"Model {self.name!r} has no solution (status {self.termination_status.value})"
            )

    @property
    def objective_value(self) -> float:
        self._require_solution()
        value = pulp.value(self.problem.objective)
        return float(value) if value is not None else 0.0

    def value(self, item: Any) -> Any:
        """
        Value of a variable, expression or container in the solution.

        Containers are mapped entry by entry and keep their kind and keys.
        """
        self._require_solution()
        if isinstance(item, ResolvedContainer):
            return item.map(self.value)
        if isinstance(item, pulp.LpVariable):
            return item.varValue
        if isinstance(item, numbers.Real):
            return item
        if isinstance(item, pulp.LpAffineExpression):
            return pulp.value(item)
        raise TypeError(f"Cannot take the value of {type(item).__name__}")

    def shadow_price(self, constraint: Any) -> Any:
        """
        Change of the objective per unit relaxation of a constraint.

        Relaxing a ``<=`` constraint raises its right hand side, relaxing a
        ``>=`` constraint lowers it. Equality constraints are treated like
        ``<=``. Containers are mapped entry by entry.
        """
        if isinstance(constraint, ResolvedContainer):
            return constraint.map(self.shadow_price)
        if isinstance(constraint, str):
            constraint = self.problem.constraints[_sanitize(constraint)]

        self._require_solution()
        if self.dual_status is not ResultStatus.FEASIBLE_POINT or constraint.pi is None:
            raise ModelingError(f"No dual solution available for constraint {constraint.name}")

        dual = float(constraint.pi)
        if constraint.sense == pulp.LpConstraintGE:
            return -dual
        return dual

    # Introspection

    def variables(self) -> List[pulp.LpVariable]:
        """All scalar variables, in the order they were added."""
        return list(self._variables)

    def constraints(self) -> List[Tuple[str, pulp.LpConstraint]]:
        return list(self.problem.constraints.items())

    def num_variables(self) -> int:
        return len(self._variables)

    def num_constraints(self) -> int:
        return len(self.problem.constraints)

    def __str__(self):
        lines = [f"{self.objective_sense.value} {self.objective_function}", "Subject to"]
        for name, constraint in self.constraints():
            lines.append(f" {name} : {constraint}")
        for var in self._variables:
            lines.append(f" {_describe_variable(var)}")
        return "\n".join(lines)

    def __repr__(self):
        return (
            f"Model({self.name!r}, variables={self.num_variables()}, "
            f"constraints={self.num_constraints()}, status={self.termination_status.value})"
        )


def _describe_variable(var: pulp.LpVariable) -> str:
    if var.lowBound is not None and var.upBound is not None:
        text = f"{var.lowBound} <= {var.name} <= {var.upBound}"
    elif var.lowBound is not None:
        text = f"{var.name} >= {var.lowBound}"
    elif var.upBound is not None:
        text = f"{var.name} <= {var.upBound}"
    else:
        text = f"{var.name} free"
    if var.cat in (pulp.LpInteger, pulp.LpBinary):
        text += ", integer"
    return text


def dot(coefficients: Sequence[float], x: Union[ResolvedContainer, Sequence[pulp.LpVariable]]) -> pulp.LpAffineExpression:
    """
    Inner product of a coefficient vector and variables, e.g. ``c' x``.

    Raises:
        DimensionMismatch: If the lengths differ.
    """
    variables = list(x.values()) if isinstance(x, ResolvedContainer) else list(x)
    coefficients = [float(c) for c in coefficients]
    if len(coefficients) != len(variables):
        raise DimensionMismatch(
            f"{len(coefficients)} coefficients for {len(variables)} variables"
        )
    return pulp.lpSum(c * var for c, var in zip(coefficients, variables))
