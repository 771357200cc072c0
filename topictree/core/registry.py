# topictree/core/registry.py
from __future__ import annotations
import inspect
from collections.abc import Callable, Iterable
from typing import Any, TYPE_CHECKING

if TYPE_CHECKING:
    from topictree.core.context import TopicContext

__all__ = [
    "Subscriber", "sameCallback", "withoutCallbacks",
    "subscribe", "subscribeOnce", "unsubscribe", "clear",
]

Subscriber = Callable[..., Any]



def sameCallback(registered: Any, target: Any) -> bool:
    """
    Identity match for registered callables.

    Bound methods are rebuilt on every attribute access (`obj.handler is
    obj.handler` is False), so they match on their (__self__, __func__) pair.
    """
    if registered is target:
        return True
    if inspect.ismethod(registered) and inspect.ismethod(target):
        return registered.__self__ is target.__self__ and registered.__func__ is target.__func__
    return False



def withoutCallbacks(items: Iterable[Any], targets: Iterable[Any]) -> list[Any]:
    """Returns a new list of `items` minus every entry matching any of `targets`."""
    targets = list(targets)
    return [item for item in items if not any(sameCallback(item, target) for target in targets)]



def _checkCallable(callbacks: Iterable[Any]) -> list[Subscriber]:
    out = list(callbacks)
    for callback in out:
        if not callable(callback):
            raise TypeError(f"Subscriber must be callable, got {type(callback).__name__}")
    return out



def subscribe(context: TopicContext, callbacks: Iterable[Subscriber]) -> None:
    context.persistentSubscribers.extend(_checkCallable(callbacks))



def subscribeOnce(context: TopicContext, callbacks: Iterable[Subscriber]) -> None:
    context.onceSubscribers.extend(_checkCallable(callbacks))



def unsubscribe(context: TopicContext, callbacks: Iterable[Subscriber] = ()) -> None:
    """
    Without callbacks, empties both lists of `context` (descendants untouched).
    Otherwise removes every registration matching one of `callbacks`.

    Lists are replaced rather than edited so an in-flight fan-out keeps
    iterating its own snapshot.
    """
    targets = list(callbacks)
    if not targets:
        context.persistentSubscribers = []
        context.onceSubscribers = []
        return
    context.persistentSubscribers = withoutCallbacks(context.persistentSubscribers, targets)
    context.onceSubscribers = withoutCallbacks(context.onceSubscribers, targets)



def clear(context: TopicContext) -> None:
    """Drops every subscription on `context` and all of its descendants."""
    for node in context.iterSubtree():
        unsubscribe(node)
