from logly import logger
from simpleeval import InvalidExpression, simple_eval


def format_value(value: object) -> str:
    """Formats a numeric result, dropping a redundant `.0`."""
    if isinstance(value, bool):
        return str(int(value))
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        return repr(value)
    return str(value)


def evaluate_expression(expression: str) -> str:
    """Evaluates an arithmetic expression.

    A parse or evaluation failure yields `"0"` instead of raising.
    """
    expr = expression.strip()
    if not expr:
        return "0"
    try:
        value = simple_eval(expr.replace("^", "**"))
    except (
        InvalidExpression,
        SyntaxError,
        ArithmeticError,
        TypeError,
        ValueError,
        RecursionError,
        MemoryError,
    ) as e:
        logger.debug(f"Calculator failed expression={expr!r} error={e}")
        return "0"
    if isinstance(value, (int, float)):
        return format_value(value)
    return "0"
