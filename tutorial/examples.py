"""
Worked examples of the getting-started tutorial.

Each builder returns a fresh, unsolved model. ``EXAMPLES`` maps the names
used on the command line to the builders.
"""

from typing import Callable, Dict
from modeling import IndexSpec, Model, dot, span
from utils.logging import setup_logger

logger = setup_logger(__name__)


def first_example() -> Model:
    """
    The introductory linear program::

        min  12x + 20y
        s.t.  6x +  8y >= 100
              7x + 12y >= 120
              x >= 0, 0 <= y <= 3
    """
    model = Model("first_example")
    x = model.add_variable("x", lower_bound=0)
    y = model.add_variable("y", lower_bound=0, upper_bound=3)
    model.set_objective("min", 12 * x + 20 * y)
    model.add_constraint(6 * x + 8 * y >= 100, "c1")
    model.add_constraint(7 * x + 12 * y >= 120, "c2")
    return model


def variable_containers() -> Model:
    """Bounds, containers and variable types."""
    model = Model("variable_containers")

    # Scalar variables: free, and bounded by keyword
    model.add_variable("free_x")
    model.add_variable("keyword_x", lower_bound=1, upper_bound=2)

    # Arrays: one-based integer ranges
    model.add_variables("a", span(1, 2), span(1, 2))

    n = 10
    lower = [1, 2, 3, 4, 5, 6, 7, 8, 9, 10]
    upper = [10, 11, 12, 13, 14, 15, 16, 17, 18, 19]
    model.add_variables(
        "x",
        IndexSpec("i", span(1, n)),
        lower_bound=lambda i: lower[i - 1],
        upper_bound=lambda i: upper[i - 1],
    )
    model.add_variables(
        "y",
        IndexSpec("i", span(1, 2)),
        IndexSpec("j", span(1, 2)),
        lower_bound=lambda i, j: 2 * i + j,
    )

    # Axis arrays: integer ranges not starting at one, or arbitrary labels
    model.add_variables(
        "z", IndexSpec("i", span(2, 3)), IndexSpec("j", span(1, 3, 2)), lower_bound=0
    )
    model.add_variables("w", span(1, 5), ["red", "blue"], upper_bound=1)

    # Sparse mappings: triangular indexing and conditions
    model.add_variables("u", IndexSpec("i", span(1, 3)), IndexSpec("j", lambda i: span(i, 5)))
    model.add_variables("v", IndexSpec("i", span(1, 9)), condition=lambda i: i % 3 == 0)

    # Variable types
    model.add_variable("integer_x", integer=True)
    model.add_variable("binary_x", binary=True)

    return model


def constraint_containers() -> Model:
    """Named constraints, constraint containers and constraints built in loops."""
    model = Model("constraint_containers")
    x = model.add_variable("x")
    y = model.add_variable("y")
    z = model.add_variables("z", span(1, 10))

    model.add_constraint(x <= 4, "con")

    # Array, axis array and sparse mapping of constraints
    model.add_constraints(None, IndexSpec("i", span(1, 3)), rule=lambda i: i * x <= i + 1)
    model.add_constraints(
        None,
        IndexSpec("i", span(1, 2)),
        IndexSpec("j", span(2, 3)),
        rule=lambda i, j: i * x <= j + 1,
    )
    model.add_constraints(
        None,
        IndexSpec("i", span(1, 2)),
        IndexSpec("j", span(1, 2)),
        rule=lambda i, j: i * x <= j + 1,
        condition=lambda i, j: i != j,
    )

    for i in span(1, 3):
        model.add_constraint(6 * x + 4 * y >= 5 * i)

    model.add_constraint(sum(z[i] for i in span(1, 10)) <= 1)
    return model


def objective_functions() -> Model:
    """Setting the objective through its sense and function separately."""
    model = Model("objective_functions")
    x = model.add_variable("x", lower_bound=0)
    y = model.add_variable("y", lower_bound=0)
    model.set_objective_sense("min")
    model.set_objective_function(x + y)
    logger.debug(
        f"Objective: {model.objective_sense.value} {model.objective_function} "
        f"({model.objective_function_type.__name__})"
    )
    return model


def vectorized() -> Model:
    """A standard-form LP written with matrix data: min c'x s.t. Ax = b, x >= 0."""
    matrix = [
        [1, 1, 9, 5],
        [3, 5, 0, 8],
        [2, 0, 6, 13],
    ]
    rhs = [7, 3, 5]
    cost = [1, 3, 5, 2]

    model = Model("vectorized")
    x = model.add_variables("x", span(1, 4), lower_bound=0)
    model.add_matrix_constraints("rows", matrix, x, rhs, sense="==")
    model.set_objective("min", dot(cost, x))
    return model


EXAMPLES: Dict[str, Callable[[], Model]] = {
    "first_example": first_example,
    "variable_containers": variable_containers,
    "constraint_containers": constraint_containers,
    "objective_functions": objective_functions,
    "vectorized": vectorized,
}


def build_example(name: str) -> Model:
    """
    Build one of the registered examples.

    Raises:
        KeyError: If there is no example with that name.
    """
    try:
        builder = EXAMPLES[name]
    except KeyError:
        raise KeyError(f"Unknown example {name!r}; available: {', '.join(EXAMPLES)}") from None
    logger.info(f"Building example {name!r}")
    return builder()
