r"""Type-shape validation of request parameters.

Values are deliberately not range-checked: negative retry counts or zero
delays are accepted as-is.
"""

from __future__ import annotations

__all__ = ["SUPPORTED_METHODS", "validate_method"]

SUPPORTED_METHODS = ("GET", "POST", "PUT")


def validate_method(method: str) -> str:
    """Validate and normalize an HTTP method name.

    Args:
        method: The HTTP method name, in any case.

    Returns:
        The upper-cased method name.

    Raises:
        ValueError: If the method is not supported.

    Example:
        ```pycon
        >>> from retrywire.core.validation import validate_method
        >>> validate_method("post")
        'POST'
        >>> validate_method("DELETE")  # doctest: +SKIP
        Traceback (most recent call last):
        ...
        ValueError: method must be one of ('GET', 'POST', 'PUT'), got 'DELETE'

        ```
    """
    normalized = method.upper()
    if normalized not in SUPPORTED_METHODS:
        msg = f"method must be one of {SUPPORTED_METHODS}, got {method!r}"
        raise ValueError(msg)
    return normalized
