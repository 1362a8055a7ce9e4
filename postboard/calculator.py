"""Simple arithmetic helpers."""


def add(a, b):
    """Return the sum of ``a`` and ``b``."""
    return a + b


def multiply(a, b):
    """Return the product of ``a`` and ``b``."""
    return a * b


def divide(a, b):
    """Divide ``a`` by ``b``.

    Raises:
        ZeroDivisionError: if ``b`` is zero.
    """
    if b == 0:
        raise ZeroDivisionError("Cannot divide by zero")
    return a / b
