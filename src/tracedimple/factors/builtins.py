"""Built-in descriptor producers for ERPs and deterministic primitives.

ERP parameters become factor constructor arguments when they are all
literals and factor edges otherwise, which is how Dimple's parameterized
factor functions are wired.
"""

from __future__ import annotations

from typing import Callable

from tracedimple.errors import SchemaError
from tracedimple.factors.descriptor import FactorDescriptor, TargetType
from tracedimple.ir.expressions import java_literal, numeric_value
from tracedimple.ir.nodes import ArrayLit, Const


BUILTIN_PRODUCERS: dict[str, Callable[[FactorDescriptor], None]] = {}


def _builtin(*names: str):
    def decorator(fn: Callable[[FactorDescriptor], None]) -> Callable[[FactorDescriptor], None]:
        for name in names:
            BUILTIN_PRODUCERS[name] = fn
        return fn

    return decorator


def _all_literal(desc: FactorDescriptor) -> bool:
    return all(isinstance(arg, Const) for arg in desc.args)


def _expect_arity(desc: FactorDescriptor, *allowed: int) -> None:
    if len(desc.args) not in allowed:
        expected = " or ".join(str(n) for n in allowed)
        raise SchemaError(
            f"{desc.primitive} expects {expected} argument(s), got {len(desc.args)}."
        )


def _parameterized(desc: FactorDescriptor, target_type: TargetType, constructor: str) -> None:
    desc.target_type = target_type
    desc.constructor_name = constructor
    if _all_literal(desc):
        desc.constructor_args = list(desc.rendered_args)
    else:
        desc.input_variables = list(desc.rendered_args)


def _deterministic(desc: FactorDescriptor, target_type: TargetType, constructor: str) -> None:
    desc.target_type = target_type
    desc.constructor_name = constructor
    desc.input_variables = list(desc.rendered_args)


def _literal_params(desc: FactorDescriptor) -> list[float]:
    values = [numeric_value(arg) for arg in desc.args]
    if any(v is None for v in values):
        raise SchemaError(
            f"{desc.primitive} needs literal numeric parameters to be translated to Dimple."
        )
    return [float(v) for v in values]  # type: ignore[arg-type]


def _double_array(values: list[float]) -> str:
    return f"new double[] {{{', '.join(java_literal(float(v)) for v in values)}}}"


# ERPs

@_builtin("flip", "bernoulli")
def flip(desc: FactorDescriptor) -> None:
    _expect_arity(desc, 0, 1)
    if not desc.args:
        desc.target_type = "Bit"
        desc.constructor_name = "Bernoulli"
        desc.constructor_args = [java_literal(0.5)]
        return
    _parameterized(desc, "Bit", "Bernoulli")


@_builtin("gaussian", "normal")
def gaussian(desc: FactorDescriptor) -> None:
    # Dimple's Normal is parameterized by precision, not standard deviation
    _expect_arity(desc, 2)
    mean, sigma = _literal_params(desc)
    if sigma <= 0:
        raise SchemaError(f"{desc.primitive} standard deviation must be positive: {sigma}")
    desc.target_type = "Real"
    desc.constructor_name = "Normal"
    desc.constructor_args = [java_literal(mean), java_literal(1.0 / (sigma * sigma))]


@_builtin("beta")
def beta(desc: FactorDescriptor) -> None:
    _expect_arity(desc, 2)
    _parameterized(desc, "Real", "Beta")


@_builtin("gamma")
def gamma(desc: FactorDescriptor) -> None:
    # shape/scale in the source, alpha/rate in Dimple
    _expect_arity(desc, 2)
    shape, scale = _literal_params(desc)
    if scale <= 0:
        raise SchemaError(f"{desc.primitive} scale must be positive: {scale}")
    desc.target_type = "Real"
    desc.constructor_name = "Gamma"
    desc.constructor_args = [java_literal(shape), java_literal(1.0 / scale)]


@_builtin("exponential")
def exponential(desc: FactorDescriptor) -> None:
    _expect_arity(desc, 1)
    _parameterized(desc, "Real", "Exponential")


@_builtin("discrete", "categorical")
def discrete(desc: FactorDescriptor) -> None:
    _expect_arity(desc, 1)
    weights = desc.args[0]
    if not isinstance(weights, ArrayLit) or not weights.elements:
        raise SchemaError(f"{desc.primitive} expects a non-empty literal array of weights.")
    desc.target_type = "Discrete"
    desc.constructor_name = "Categorical"
    values = [numeric_value(el) for el in weights.elements]
    if any(v is None for v in values):
        raise SchemaError(f"{desc.primitive} weights must be numeric literals.")
    desc.variable_args = [str(i) for i in range(len(values))]
    desc.constructor_args = [_double_array(values)]  # type: ignore[arg-type]


@_builtin("randomInteger")
def random_integer(desc: FactorDescriptor) -> None:
    _expect_arity(desc, 1)
    count = numeric_value(desc.args[0])
    if count is None or count < 1 or count != int(count):
        raise SchemaError(f"{desc.primitive} expects a positive integer literal.")
    size = int(count)
    desc.target_type = "Discrete"
    desc.constructor_name = "Categorical"
    desc.variable_args = [str(i) for i in range(size)]
    desc.constructor_args = [_double_array([1.0 / size] * size)]


@_builtin("uniformDraw")
def uniform_draw(desc: FactorDescriptor) -> None:
    # the drawn values become the Discrete domain
    _expect_arity(desc, 1)
    items = desc.args[0]
    if not isinstance(items, ArrayLit) or not items.elements:
        raise SchemaError(f"{desc.primitive} expects a non-empty literal array of values.")
    if not all(isinstance(el, Const) and el.value is not None for el in items.elements):
        raise SchemaError(f"{desc.primitive} values must be literals.")
    size = len(items.elements)
    desc.target_type = "Discrete"
    desc.constructor_name = "Categorical"
    desc.variable_args = [java_literal(el.value) for el in items.elements]  # type: ignore[union-attr]
    desc.constructor_args = [_double_array([1.0 / size] * size)]


# deterministic primitives

@_builtin("and")
def and_(desc: FactorDescriptor) -> None:
    _deterministic(desc, "Bit", "And")


@_builtin("or")
def or_(desc: FactorDescriptor) -> None:
    _deterministic(desc, "Bit", "Or")


@_builtin("xor")
def xor(desc: FactorDescriptor) -> None:
    _deterministic(desc, "Bit", "Xor")


@_builtin("not")
def not_(desc: FactorDescriptor) -> None:
    _expect_arity(desc, 1)
    _deterministic(desc, "Bit", "Not")


@_builtin("equal", "eq")
def equal(desc: FactorDescriptor) -> None:
    _deterministic(desc, "Bit", "Equals")


@_builtin("greater", "gt")
def greater(desc: FactorDescriptor) -> None:
    _expect_arity(desc, 2)
    _deterministic(desc, "Bit", "GreaterThan")


@_builtin("less", "lt")
def less(desc: FactorDescriptor) -> None:
    _expect_arity(desc, 2)
    _deterministic(desc, "Bit", "LessThan")


@_builtin("plus", "sum")
def plus(desc: FactorDescriptor) -> None:
    _deterministic(desc, "Real", "Sum")


@_builtin("minus")
def minus(desc: FactorDescriptor) -> None:
    _expect_arity(desc, 2)
    _deterministic(desc, "Real", "Subtract")


@_builtin("mult", "product")
def mult(desc: FactorDescriptor) -> None:
    _deterministic(desc, "Real", "Product")


@_builtin("div")
def div(desc: FactorDescriptor) -> None:
    _expect_arity(desc, 2)
    _deterministic(desc, "Real", "Divide")


@_builtin("neg")
def neg(desc: FactorDescriptor) -> None:
    _expect_arity(desc, 1)
    _deterministic(desc, "Real", "Negate")


@_builtin("abs")
def abs_(desc: FactorDescriptor) -> None:
    _expect_arity(desc, 1)
    _deterministic(desc, "Real", "Abs")


@_builtin("exp")
def exp(desc: FactorDescriptor) -> None:
    _expect_arity(desc, 1)
    _deterministic(desc, "Real", "Exp")


@_builtin("log")
def log(desc: FactorDescriptor) -> None:
    _expect_arity(desc, 1)
    _deterministic(desc, "Real", "Log")


@_builtin("sqrt")
def sqrt(desc: FactorDescriptor) -> None:
    _expect_arity(desc, 1)
    _deterministic(desc, "Real", "Sqrt")
