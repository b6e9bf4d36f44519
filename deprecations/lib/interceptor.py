"""Wrap named methods so every call reports a deprecation.

Wrapping happens once, at declaration time. The installed wrapper builds a
fresh DeprecationEvent on each call, hands it to the dispatcher and then
calls the original with the exact arguments it received. Return values and
exceptions of the original pass through untouched.

Declaring the same method twice is a no-op: the existing record is returned
and nothing new is installed. This also covers subclasses whose inherited
method was already declared on a base class.

Targets are tracked through weak references. Records never keep a declared
object alive, and a record disappears together with its target.
"""

from __future__ import annotations

import functools
import inspect
import logging
import types
import weakref
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple

from deprecations.lib.errors import ConfigurationError
from deprecations.lib.events import DeprecationEvent

logger = logging.getLogger(__name__)

__all__ = ["MethodInterceptor", "WrappedMethod", "is_deprecated"]

# Set on every installed wrapper
_MARKER = "__deprecation_wrapped__"


@dataclass(frozen=True)
class WrappedMethod:
    """Association between an original operation and its wrapper."""

    owner: str
    name: str
    original: Any
    wrapper: Any


def is_deprecated(func: Any) -> bool:
    """Return True if ``func`` (or the function it decorates) was wrapped."""
    if isinstance(func, (staticmethod, classmethod)):
        func = func.__func__
    func = getattr(func, "__func__", func)
    return getattr(func, _MARKER, False) is True


def _owner_name(target: Any) -> str:
    if isinstance(target, types.ModuleType):
        return target.__name__
    if isinstance(target, type):
        return target.__qualname__
    return type(target).__qualname__


def _deref(ref: Any) -> Any:
    return ref() if isinstance(ref, weakref.ref) else ref


class MethodInterceptor:
    """Install deprecation wrappers around existing operations.

    Args:
        dispatch: Callable receiving a DeprecationEvent, normally
            ``DeprecationDispatcher.dispatch``
    """

    def __init__(self, dispatch: Callable[[DeprecationEvent], None]) -> None:
        self._dispatch = dispatch
        # id(target) -> (weak reference to target, records by method name)
        self._records: Dict[int, Tuple[Any, Dict[str, WrappedMethod]]] = {}

    @property
    def records(self) -> List[WrappedMethod]:
        return [
            record
            for _, by_name in list(self._records.values())
            for record in by_name.values()
        ]

    def wrap(self, target: Any, method_name: str) -> WrappedMethod:
        """Replace ``method_name`` on ``target`` with a reporting wrapper.

        Args:
            target: Class, module or object owning the method
            method_name: Name of the attribute to wrap

        Returns:
            The wrapping record (the existing one if already declared)

        Raises:
            ConfigurationError: The attribute is missing or not callable
        """
        owner = _owner_name(target)
        existing = self._lookup(target, method_name)
        if existing is not None:
            logger.debug("%s.%s is already declared deprecated", owner, method_name)
            return existing

        try:
            raw = inspect.getattr_static(target, method_name)
        except AttributeError:
            raise ConfigurationError(
                f"Cannot deprecate {owner}.{method_name}: no such method",
                field="method_name",
                value=method_name,
            ) from None

        if is_deprecated(raw):
            logger.debug("%s.%s already wraps a deprecated method", owner, method_name)
            record = WrappedMethod(
                owner=owner,
                name=method_name,
                original=getattr(_unwrap_descriptor(raw), "__wrapped__", raw),
                wrapper=_unwrap_bound(raw),
            )
            return self._remember(target, record)

        if isinstance(target, (type, types.ModuleType)):
            replacement = self._wrap_descriptor(raw, owner, method_name)
        else:
            replacement = self._wrap_instance_attribute(target, raw, owner, method_name)

        setattr(target, method_name, replacement)
        record = WrappedMethod(
            owner=owner,
            name=method_name,
            original=raw,
            wrapper=_unwrap_bound(replacement),
        )
        logger.debug("Declared %s.%s deprecated", owner, method_name)
        return self._remember(target, record)

    def _lookup(self, target: Any, method_name: str) -> Optional[WrappedMethod]:
        entry = self._records.get(id(target))
        # A stale entry may share the id of a collected target
        if entry is None or _deref(entry[0]) is not target:
            return None
        return entry[1].get(method_name)

    def _remember(self, target: Any, record: WrappedMethod) -> WrappedMethod:
        key = id(target)
        entry = self._records.get(key)
        if entry is None or _deref(entry[0]) is not target:
            try:
                ref: Any = weakref.ref(target, functools.partial(self._forget, key))
            except TypeError:
                # Targets without weakref support are held strongly
                ref = target
            entry = (ref, {})
            self._records[key] = entry
        entry[1][record.name] = record
        return record

    def _forget(self, key: int, ref: weakref.ref) -> None:
        entry = self._records.get(key)
        if entry is not None and entry[0] is ref:
            del self._records[key]

    def _wrap_descriptor(self, raw: Any, owner: str, method_name: str) -> Any:
        if isinstance(raw, staticmethod):
            return staticmethod(self._wrap_callable(raw.__func__, owner, method_name))
        if isinstance(raw, classmethod):
            return classmethod(self._wrap_callable(raw.__func__, owner, method_name))
        return self._wrap_callable(raw, owner, method_name)

    def _wrap_instance_attribute(self, target: Any, raw: Any, owner: str, method_name: str) -> Any:
        # Shadow the attribute on the instance only
        if isinstance(raw, staticmethod):
            return self._wrap_callable(raw.__func__, owner, method_name)
        if isinstance(raw, types.FunctionType) and method_name not in getattr(target, "__dict__", {}):
            # The wrapper is bound, not closed over the instance
            return types.MethodType(self._wrap_callable(raw, owner, method_name), target)
        return self._wrap_callable(getattr(target, method_name), owner, method_name)

    def _wrap_callable(self, func: Any, owner: str, method_name: str) -> Any:
        if not callable(func):
            raise ConfigurationError(
                f"Cannot deprecate {owner}.{method_name}: attribute is not callable",
                field="method_name",
                value=method_name,
            )

        dispatch = self._dispatch

        if inspect.iscoroutinefunction(func):

            @functools.wraps(func)
            async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
                dispatch(DeprecationEvent(method_name=method_name, owner=owner))
                return await func(*args, **kwargs)

            setattr(async_wrapper, _MARKER, True)
            return async_wrapper

        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            dispatch(DeprecationEvent(method_name=method_name, owner=owner))
            return func(*args, **kwargs)

        setattr(wrapper, _MARKER, True)
        return wrapper


def _unwrap_descriptor(raw: Any) -> Any:
    if isinstance(raw, (staticmethod, classmethod)):
        return raw.__func__
    return getattr(raw, "__func__", raw)


def _unwrap_bound(obj: Any) -> Any:
    if isinstance(obj, types.MethodType):
        return obj.__func__
    return obj
