"""
Diagnostic message templates.
"""

DEFAULT_REASON = "cross platform incompatibility."


def _reason_or_default(reason: str) -> str:
    return reason if reason else DEFAULT_REASON


def standard_message(target: str, reason: str) -> str:
    """Message for a banned class or package used directly."""
    return f"Use of {target} has been banned due to {_reason_or_default(reason)}"


def method_call_message(method: str, target: str, reason: str) -> str:
    """Message for a call that is banned because of its owner or result type."""
    return (f"Use of {method} is not allowed, as {target} has been banned "
            f"due to {_reason_or_default(reason)}")


def constructor_message(constructor: str, target: str, reason: str) -> str:
    """Message for a constructor that takes a banned type."""
    return (f"Use of this constructor ({constructor}) is not allowed, as {target} "
            f"is banned due to {_reason_or_default(reason)}")
