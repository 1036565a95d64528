"""Actions — commands that can be bound to a UI control.

An Action wraps an effect together with an observable runnable flag.
Bindings use the flag to disable or hide the triggering control, and
run() refuses to execute while the flag is False.
"""

from __future__ import annotations

import logging
from typing import Callable

from bindfx.errors import ActionNotImplementedError, NotRunnableError
from bindfx.observable import DefaultObservableValue, ObservableValue

logger = logging.getLogger("bindfx.action")


class Action:
    """A runnable effect gated by an observable flag.

    Pass the effect to the constructor, or subclass and override _do_run().
    """

    def __init__(self, effect: Callable[[], object] | None = None, *, runnable: bool = True) -> None:
        self._effect = effect
        self._runnable: DefaultObservableValue[bool] = DefaultObservableValue(runnable)

    @property
    def runnable(self) -> ObservableValue[bool]:
        return self._runnable

    def is_runnable(self) -> bool:
        return bool(self._runnable.get())

    def set_runnable(self, runnable: bool) -> None:
        self._runnable.set(runnable)

    def run(self) -> None:
        """Run the effect. Raises NotRunnableError if the action is disabled."""
        if not self.is_runnable():
            logger.warning("Refusing to run %r while it is not runnable", self)
            raise NotRunnableError()
        self._do_run()

    def _do_run(self) -> None:
        if self._effect is None:
            raise ActionNotImplementedError()
        self._effect()

    def __repr__(self) -> str:
        name = getattr(self._effect, "__name__", self.__class__.__name__)
        return f"Action({name}, runnable={self.is_runnable()})"


def action(effect: Callable[[], object]) -> Action:
    """Create an Action from an effect. Also usable as a decorator.

    Usage:
        @action
        def save():
            repository.save(model.get())

        save.set_runnable(False)
        save.run()  # raises NotRunnableError
    """
    return Action(effect)
