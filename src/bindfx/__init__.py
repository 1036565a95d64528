"""bindfx: observable values, lists and actions for data binding."""

from importlib.metadata import version as _version

__version__ = _version("bindfx")

from bindfx._registry import ListenerRegistry, Registration
from bindfx.errors import (
    ActionNotImplementedError,
    BindfxError,
    DoublePostponeError,
    IndexOutOfRangeError,
    InvalidArgumentError,
    NotRunnableError,
    ReentrantMutationError,
    StaleProceedError,
)
from bindfx.observable import (
    DefaultObservableValue,
    Observable,
    ObservableValue,
    ValueChangeEvent,
    WritableObservableValue,
    observable_value,
)
from bindfx.computed import ComputedValue, computed_value
from bindfx.vetoable import PostponedChange, VetoableEvent, VetoableObservableValue, vetoable_value
from bindfx.observable_list import (
    DefaultObservableList,
    ItemChangeEvent,
    MappedObservableList,
    ObservableList,
    WritableObservableList,
    observable_list,
    observable_list_of,
)
from bindfx.action import Action, action
# textual NOT auto-imported — opt-in only

__all__ = [
    "Action",
    "ActionNotImplementedError",
    "BindfxError",
    "ComputedValue",
    "DefaultObservableList",
    "DefaultObservableValue",
    "DoublePostponeError",
    "IndexOutOfRangeError",
    "InvalidArgumentError",
    "ItemChangeEvent",
    "ListenerRegistry",
    "MappedObservableList",
    "NotRunnableError",
    "Observable",
    "ObservableList",
    "ObservableValue",
    "PostponedChange",
    "ReentrantMutationError",
    "Registration",
    "StaleProceedError",
    "ValueChangeEvent",
    "VetoableEvent",
    "VetoableObservableValue",
    "WritableObservableList",
    "WritableObservableValue",
    "action",
    "computed_value",
    "observable_list",
    "observable_list_of",
    "observable_value",
    "vetoable_value",
]
