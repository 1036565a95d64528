"""Textual integration for bindfx. Opt-in — requires textual.

Binds observables to Textual widgets. Every binding is a strong listener
on the model, so it stays active until the returned Registration is
removed (typically from the widget's on_unmount).

Effects are guarded: they are skipped while the app is not running or is
paused, NoMatches from widget queries is swallowed, and notifications
raised on a background thread are marshaled with call_from_thread.

Create bindings from on_mount, once the app is running.
"""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Any, Callable, TypeVar

from textual.css.query import NoMatches

from bindfx._registry import Registration
from bindfx.action import Action
from bindfx.errors import require
from bindfx.observable import ObservableValue, ValueChangeEvent, WritableObservableValue, differs
from bindfx.observable_list import ItemChangeEvent, ObservableList

logger = logging.getLogger("bindfx.textual")

# Module-owned pause state, keyed by id(app) so multiple apps work in tests.
_paused_apps: set[int] = set()

E = TypeVar("E")


@contextmanager
def pause(app):
    """Suspend bindings of app during widget replacement."""
    key = id(app)
    _paused_apps.add(key)
    try:
        yield
    finally:
        _paused_apps.discard(key)


def is_safe(app) -> bool:
    """Is the widget tree in a queryable state?"""
    return app.is_running and id(app) not in _paused_apps


def _guarded(app, effect: Callable[[E], None]) -> Callable[[E], None]:
    _main = threading.get_ident()

    def _safe(event: E) -> None:
        try:
            effect(event)
        except NoMatches:
            logger.debug("Skipped binding update, widget is not mounted")

    def _listener(event: E) -> None:
        if not is_safe(app):
            return
        if threading.get_ident() != _main:
            app.call_from_thread(_safe, event)
        else:
            _safe(event)

    return _listener


def bind(app, model: ObservableValue, effect: Callable[[ValueChangeEvent], None]) -> Registration:
    """Call effect with every change event of model, starting with the current value."""
    require(model, "model")
    require(effect, "effect")
    return model.add_listener(_guarded(app, effect), fire_initial=True)


def bind_text(app, model: ObservableValue[str], widget) -> Registration:
    """Keep widget's content (Static, Label) equal to model."""
    require(widget, "widget")

    def _update(event: ValueChangeEvent) -> None:
        widget.update("" if event.value is None else str(event.value))

    return bind(app, model, _update)


def bind_visible(app, model: ObservableValue[bool], widget) -> Registration:
    """Show widget while model is True, hide it while False. None is ignored."""
    require(widget, "widget")

    def _update(event: ValueChangeEvent) -> None:
        if event.value is not None and event.value != widget.display:
            widget.display = event.value

    return bind(app, model, _update)


def bind_enabled(app, model: ObservableValue[bool], widget) -> Registration:
    """Enable widget while model is True, disable it while False. None is ignored."""
    require(widget, "widget")

    def _update(event: ValueChangeEvent) -> None:
        if event.value is None:
            return
        disabled = not event.value
        if widget.disabled != disabled:
            widget.disabled = disabled

    return bind(app, model, _update)


def bind_class_name(app, model: ObservableValue[str], widget) -> Registration:
    """Swap the CSS class named by model's old value for the one named by its new value."""
    require(widget, "widget")

    def _update(event: ValueChangeEvent) -> None:
        if event.old_value and event.old_value.strip():
            widget.remove_class(event.old_value)
        if event.value and event.value.strip():
            widget.add_class(event.value)

    return bind(app, model, _update)


def bind_field_value(app, model: ObservableValue, widget, empty_value: Any = None) -> Registration:
    """Keep an input widget's value equal to model.

    A model value equal to empty_value clears the widget, and so does
    removing the binding.
    """
    require(widget, "widget")

    def _update(event: ValueChangeEvent) -> None:
        if not differs(empty_value, event.value):
            widget.clear()
        elif differs(event.value, widget.value):
            widget.value = event.value

    registration = bind(app, model, _update)
    return Registration.combine(registration, Registration(widget.clear))


def reverse_bind_field_value(model: WritableObservableValue) -> Callable[[Any], None]:
    """Message handler that writes a changed widget value into model.

    Usage:
        def on_input_changed(self, message: Input.Changed) -> None:
            self._name_handler(message)
    """
    require(model, "model")

    def _handler(message) -> None:
        model.set(message.value)

    return _handler


def bind_read_only(app, model: ObservableValue[bool], widget) -> Registration:
    """Make widget (TextArea) read-only while model is True. None is ignored."""
    require(widget, "widget")

    def _update(event: ValueChangeEvent) -> None:
        if event.value is not None and event.value != widget.read_only:
            widget.read_only = event.value

    return bind(app, model, _update)


def bind_method(app, model: ObservableValue, method: Callable[[Any], object]) -> Registration:
    """Call method with every value of model, starting with the current one."""
    require(method, "method")
    return bind(app, model, lambda event: method(event.value))


def bind_children(app, model: ObservableList, container) -> Registration:
    """Keep container's children equal to the widgets held by model.

    Each structural event is applied as a single mount, remove or move, and
    list_changed remounts everything. Removing the binding removes the
    children. Pair with ObservableList.map to turn items into widgets.

    Usage:
        rows = todos.map(TodoRow)
        self._rows = bind_children(self.app, rows, self.query_one("#todos"))
    """
    require(model, "model")
    require(container, "container")

    def _update(event: ItemChangeEvent) -> None:
        if event.is_list_changed():
            container.remove_children()
            items = list(event.sender)
            if items:
                container.mount(*items)
        elif event.is_item_added():
            if event.new_position < len(container.children):
                container.mount(event.item, before=event.new_position)
            else:
                container.mount(event.item)
        elif event.is_item_removed():
            event.item.remove()
        elif event.new_position > event.old_position:
            container.move_child(event.item, after=event.new_position)
        else:
            container.move_child(event.item, before=event.new_position)

    registration = model.add_listener(_guarded(app, _update), fire_initial=True)
    return Registration.combine(registration, Registration(container.remove_children))


def bind_options(app, model: ObservableList, option_list) -> Registration:
    """Refill option_list (OptionList) from model on every change.

    Removing the binding empties option_list.
    """
    require(model, "model")
    require(option_list, "option_list")

    def _update(event: ItemChangeEvent) -> None:
        option_list.clear_options()
        option_list.add_options(list(event.sender))

    registration = model.add_listener(_guarded(app, _update), fire_initial=True)
    return Registration.combine(registration, Registration(option_list.clear_options))


def press_handler(action: Action) -> Callable[[Any], None]:
    """Message handler that runs action when its button is pressed.

    Usage:
        def on_button_pressed(self, message: Button.Pressed) -> None:
            if message.button.id == "save":
                self._save_handler(message)
    """
    require(action, "action")

    def _handler(message) -> None:
        action.run()

    return _handler


def bind_action(app, action: Action, widget) -> tuple[Registration, Callable[[Any], None]]:
    """Disable widget (typically a Button) while action is not runnable.

    Returns the binding and a press handler that runs action.
    """
    require(action, "action")
    return bind_enabled(app, action.runnable, widget), press_handler(action)


def bind_action_hidden(app, action: Action, widget) -> tuple[Registration, Callable[[Any], None]]:
    """Hide widget while action is not runnable.

    Returns the binding and a press handler that runs action.
    """
    require(action, "action")
    return bind_visible(app, action.runnable, widget), press_handler(action)
