"""bindfx exception hierarchy.

Every error also derives from the closest builtin, so callers that only
know about ValueError / RuntimeError / IndexError keep working.
"""


class BindfxError(Exception):
    """Base class for all bindfx exceptions."""


class InvalidArgumentError(BindfxError, ValueError):
    """Raised when None is passed where a listener, function or value is required."""


class ReentrantMutationError(BindfxError, RuntimeError):
    """Raised when a value is set from inside its own change notification."""

    def __init__(self, observable):
        self.observable = observable
        super().__init__("The value is being updated")


class DoublePostponeError(BindfxError, RuntimeError):
    """Raised when a second listener tries to postpone the same decision."""

    def __init__(self):
        super().__init__("The change has already been postponed by another listener")


class StaleProceedError(BindfxError, RuntimeError):
    """Raised when a postponed change proceeds after the value has changed."""

    def __init__(self, expected, actual):
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"The value has changed since this change was postponed "
            f"(expected {expected!r}, found {actual!r})"
        )


class NotRunnableError(BindfxError, RuntimeError):
    """Raised when an Action is run while its runnable flag is False."""

    def __init__(self):
        super().__init__("Action is not runnable at the moment")


class ActionNotImplementedError(BindfxError, NotImplementedError):
    """Raised when an Action has no effect and does not override _do_run."""

    def __init__(self):
        super().__init__("Pass an effect to Action or override _do_run()")


class IndexOutOfRangeError(BindfxError, IndexError):
    """Raised when a list index is outside the valid bounds."""

    def __init__(self, index: int, size: int, *, inclusive: bool = False):
        self.index = index
        self.size = size
        upper = "]" if inclusive else ")"
        super().__init__(f"Index {index} out of range [0, {size}{upper}")


def require(value, name: str):
    """Return value, raising InvalidArgumentError if it is None."""
    if value is None:
        raise InvalidArgumentError(f"{name} must not be None")
    return value
