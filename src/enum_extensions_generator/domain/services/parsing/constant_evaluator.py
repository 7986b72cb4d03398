#!/usr/bin/env python3

"""Static evaluation of enum member values.

Values are computed the way the ``enum`` machinery assigns them at class
creation time: literals, arithmetic and bitwise folding, references to members
declared earlier in the same body, ``auto()`` and ``member(...)``. Anything
else has no statically known value.
"""

import ast
import operator
from collections.abc import Callable

from ...models import EnumMemberSymbol
from ...models.markers import AUTO, MEMBER, NONMEMBER
from .syntax_provider import iter_scope_statements

# Largest shift or exponent folded; bigger operands are treated as non-constant
MAX_FOLDED_EXPONENT = 4096

# Largest folded values; anything bigger is treated as non-constant
MAX_FOLDED_BITS = 65536
MAX_FOLDED_STRING_LENGTH = 4096

# Failures of ast.literal_eval on arbitrary source
LITERAL_EVAL_ERRORS = (ValueError, TypeError, SyntaxError, MemoryError, RecursionError)

_BINARY_OPERATORS: dict[type[ast.operator], Callable[[object, object], object]] = {
    ast.Add: operator.add,
    ast.Sub: operator.sub,
    ast.Mult: operator.mul,
    ast.FloorDiv: operator.floordiv,
    ast.Mod: operator.mod,
    ast.Pow: operator.pow,
    ast.LShift: operator.lshift,
    ast.RShift: operator.rshift,
    ast.BitOr: operator.or_,
    ast.BitAnd: operator.and_,
    ast.BitXor: operator.xor,
}

_UNARY_OPERATORS: dict[type[ast.unaryop], Callable[[object], object]] = {
    ast.UAdd: operator.pos,
    ast.USub: operator.neg,
    ast.Invert: operator.invert,
}


class NotConstant(Exception):
    """Raised when an expression has no statically known value."""


def _is_constant_value(value: object) -> bool:
    return isinstance(value, (int, str)) and not isinstance(value, bool)


class ConstantEvaluator:
    """Computes the members of one enum body.

    Args:
        resolve: Maps a callee expression to its fully qualified name
        is_flag: Body belongs to a Flag/IntFlag enum (auto() yields powers of two)
        underlying_type: Mixin storage type, if declared
        is_str_enum: Body belongs to a StrEnum (auto() yields the lower-cased name)
    """

    def __init__(
        self,
        resolve: Callable[[ast.expr], str | None],
        is_flag: bool = False,
        underlying_type: str | None = None,
        is_str_enum: bool = False,
    ):
        self.resolve = resolve
        self.is_flag = is_flag
        self.underlying_type = underlying_type
        self.is_str_enum = is_str_enum

    def evaluate_members(self, body: list[ast.stmt]) -> tuple[EnumMemberSymbol, ...]:
        """Walk an enum body and return its members in declaration order.

        Args:
            body: Statements of the class body

        Returns:
            Members; ``constant_value`` is None for members whose value is unknown
        """
        ignored = self._ignored_names(body)
        namespace: dict[str, int | str] = {}
        last_values: list[int | str] = []
        members: list[EnumMemberSymbol] = []
        # Once a value is unknown, later auto() values are unknown too
        unknown_seen = False

        for stmt in iter_scope_statements(body):
            assignment = self._member_assignment(stmt)
            if assignment is None:
                continue
            names, value_expr = assignment
            if self._is_descriptor(value_expr) or self._is_call_to(value_expr, NONMEMBER):
                continue

            for name in names:
                if name in ignored or not self._is_member_name(name):
                    continue
                try:
                    value = self._member_value(name, value_expr, namespace, last_values, unknown_seen)
                except NotConstant:
                    unknown_seen = True
                    members.append(EnumMemberSymbol(name=name, constant_value=None))
                    continue

                namespace[name] = value
                last_values.append(value)
                members.append(EnumMemberSymbol(name=name, constant_value=value))

        return tuple(members)

    @staticmethod
    def _member_assignment(stmt: ast.stmt) -> tuple[list[str], ast.expr] | None:
        """Names bound by a plain assignment and the assigned expression."""
        if isinstance(stmt, ast.Assign):
            names = [t.id for t in stmt.targets if isinstance(t, ast.Name)]
            if len(names) != len(stmt.targets):
                return None
            return names, stmt.value
        if isinstance(stmt, ast.AnnAssign) and stmt.value is not None:
            if isinstance(stmt.target, ast.Name):
                return [stmt.target.id], stmt.value
        return None

    @staticmethod
    def _is_member_name(name: str) -> bool:
        if name.startswith("__") and name.endswith("__"):
            return False  # dunder
        if name.startswith("__"):
            return False  # private, name-mangled
        if len(name) > 2 and name.startswith("_") and name.endswith("_"):
            return False  # sunder, reserved by enum
        return True

    @staticmethod
    def _is_descriptor(expr: ast.expr) -> bool:
        return isinstance(expr, ast.Lambda)

    @staticmethod
    def _ignored_names(body: list[ast.stmt]) -> set[str]:
        """Names listed in the body's ``_ignore_`` declaration."""
        for stmt in iter_scope_statements(body):
            if not isinstance(stmt, ast.Assign):
                continue
            if not any(isinstance(t, ast.Name) and t.id == "_ignore_" for t in stmt.targets):
                continue
            try:
                value = ast.literal_eval(stmt.value)
            except LITERAL_EVAL_ERRORS:
                return set()
            if isinstance(value, str):
                return set(value.replace(",", " ").split())
            if isinstance(value, (list, tuple)):
                return {v for v in value if isinstance(v, str)}
        return set()

    def _is_call_to(self, expr: ast.expr, qualified_name: str) -> bool:
        return isinstance(expr, ast.Call) and self.resolve(expr.func) == qualified_name

    def _member_value(
        self,
        name: str,
        expr: ast.expr,
        namespace: dict[str, int | str],
        last_values: list[int | str],
        unknown_seen: bool,
    ) -> int | str:
        if isinstance(expr, ast.Call) and self._is_call_to(expr, MEMBER):
            if len(expr.args) != 1 or expr.keywords:
                raise NotConstant(name)
            expr = expr.args[0]

        if isinstance(expr, ast.Call) and self._is_call_to(expr, AUTO):
            if expr.args or expr.keywords:
                raise NotConstant(name)
            return self._auto_value(name, last_values, unknown_seen)

        value = self.evaluate(expr, namespace)
        if self.underlying_type == "int" and isinstance(value, str):
            raise NotConstant(name)
        return value

    def _auto_value(self, name: str, last_values: list[int | str], unknown_seen: bool) -> int | str:
        """Value auto() produces at this position of the body."""
        if self.is_str_enum:
            return name.lower()
        if self.underlying_type not in (None, "int"):
            raise NotConstant(name)
        if unknown_seen:
            raise NotConstant(name)
        if not last_values:
            return 1
        if not all(isinstance(v, int) for v in last_values):
            raise NotConstant(name)
        highest = max(int(v) for v in last_values)
        if self.is_flag:
            if highest < 0:
                raise NotConstant(name)
            return 2 ** highest.bit_length()
        return highest + 1

    def evaluate(self, expr: ast.expr, namespace: dict[str, int | str]) -> int | str:
        """Fold a constant expression.

        Args:
            expr: Expression to evaluate
            namespace: Members bound so far in the body

        Returns:
            The integer or string value

        Raises:
            NotConstant: If the expression has no statically known value, is
                nested too deeply to fold, or folds to an oversized value
        """
        try:
            return self._fold(expr, namespace)
        except RecursionError as e:
            raise NotConstant(f"expression nested too deeply at line {expr.lineno}") from e

    def _fold(self, expr: ast.expr, namespace: dict[str, int | str]) -> int | str:
        if isinstance(expr, ast.Constant):
            if _is_constant_value(expr.value):
                return expr.value
            raise NotConstant(ast.unparse(expr))

        if isinstance(expr, ast.Name):
            if expr.id in namespace:
                return namespace[expr.id]
            raise NotConstant(expr.id)

        if isinstance(expr, ast.UnaryOp):
            unary = _UNARY_OPERATORS.get(type(expr.op))
            operand = self._fold(expr.operand, namespace)
            if unary is None or not isinstance(operand, int):
                raise NotConstant(ast.unparse(expr))
            return int(unary(operand))  # type: ignore[call-overload]

        if isinstance(expr, ast.BinOp):
            binary = _BINARY_OPERATORS.get(type(expr.op))
            if binary is None:
                raise NotConstant(ast.unparse(expr))
            left = self._fold(expr.left, namespace)
            right = self._fold(expr.right, namespace)
            if not _within_bounds(expr.op, left, right):
                raise NotConstant(ast.unparse(expr))
            try:
                result = binary(left, right)
            except (TypeError, ValueError, ZeroDivisionError, OverflowError) as e:
                raise NotConstant(ast.unparse(expr)) from e
            if not _is_constant_value(result) or _is_oversized(result):
                raise NotConstant(ast.unparse(expr))
            return result  # type: ignore[return-value]

        raise NotConstant(ast.unparse(expr))


def _is_oversized(value: object) -> bool:
    if isinstance(value, str):
        return len(value) > MAX_FOLDED_STRING_LENGTH
    if isinstance(value, int):
        return value.bit_length() > MAX_FOLDED_BITS
    return False


def _within_bounds(op: ast.operator, left: int | str, right: int | str) -> bool:
    """Check that folding ``left op right`` cannot build an oversized value."""
    if isinstance(op, (ast.Pow, ast.LShift)):
        if not isinstance(right, int) or not 0 <= right <= MAX_FOLDED_EXPONENT:
            return False
        if not isinstance(left, int):
            return True
        if isinstance(op, ast.Pow):
            return left.bit_length() * right <= MAX_FOLDED_BITS
        return left.bit_length() + right <= MAX_FOLDED_BITS
    if isinstance(op, ast.Mult) and (isinstance(left, str) or isinstance(right, str)):
        text, count = (left, right) if isinstance(left, str) else (right, left)
        if not isinstance(count, int) or not isinstance(text, str):
            return False
        return len(text) * max(count, 0) <= MAX_FOLDED_STRING_LENGTH
    return True
