# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Design by contract utilities for :mod:`portafs`.

Contracts are inert unless enabled through the ``PORTAFS_DBC`` environment
variable, :func:`enable_dbc`, or the :func:`dbc_enabled` context manager.
Failed predicates raise :class:`AssertionError`; state machine violations raise
:class:`InvalidStateError`.
"""

from __future__ import annotations

import builtins
import copy
import logging
import os
import shutil
from collections.abc import Callable, Iterator, Mapping, Sequence
from contextlib import ExitStack, contextmanager
from functools import wraps
from typing import ParamSpec, TypeVar, cast

from ._errors import InvalidStateError, StateError
from ._state_machine import (
    StateMachineSpec,
    TransitionSpec,
    extract_state_machine,
    in_state,
    state_machine,
    transition,
)

P = ParamSpec("P")
R = TypeVar("R")
T = TypeVar("T", bound=object)

type ContractResult = bool | tuple[bool, *tuple[object, ...]] | None
ContractCallable = Callable[..., ContractResult | object]

_ENV_FLAG = "PORTAFS_DBC"
_forced_state: bool | None = None

# Calls that touch the filesystem or emit logs; forbidden inside @pure.
_IMPURE_TARGETS: tuple[tuple[object, str, str], ...] = (
    (builtins, "open", "builtins.open"),
    (os, "open", "os.open"),
    (os, "mkdir", "os.mkdir"),
    (os, "makedirs", "os.makedirs"),
    (os, "rmdir", "os.rmdir"),
    (os, "unlink", "os.unlink"),
    (os, "remove", "os.remove"),
    (shutil, "rmtree", "shutil.rmtree"),
    (logging.Logger, "_log", "logging"),
)


def _coerce_flag(value: str | None) -> bool:
    if value is None:
        return False
    return value.strip().lower() not in {"", "0", "false", "off", "no"}


def dbc_active() -> bool:
    """Return ``True`` when DbC checks should run."""

    if _forced_state is not None:
        return _forced_state
    return _coerce_flag(os.getenv(_ENV_FLAG))


def enable_dbc() -> None:
    """Force DbC enforcement on."""

    global _forced_state
    _forced_state = True


def disable_dbc() -> None:
    """Force DbC enforcement off."""

    global _forced_state
    _forced_state = False


@contextmanager
def dbc_enabled(*, active: bool = True) -> Iterator[None]:
    """Temporarily set the DbC flag inside a ``with`` block."""

    global _forced_state
    previous = _forced_state
    _forced_state = active
    try:
        yield
    finally:
        _forced_state = previous


def _qualname(target: object) -> str:
    return getattr(target, "__qualname__", repr(target))


def _normalize_contract_result(result: object) -> tuple[bool, str | None]:
    if isinstance(result, tuple):
        sequence_result = cast(Sequence[object], result)
        if not sequence_result:
            raise TypeError("Contract callables must not return empty tuples")
        detail = None if len(sequence_result) == 1 else str(sequence_result[1])
        return bool(sequence_result[0]), detail
    if result is None:
        return False, None
    return bool(result), None


def _evaluate_contract(
    *,
    kind: str,
    func: Callable[..., object],
    predicate: ContractCallable,
    args: tuple[object, ...],
    kwargs: Mapping[str, object],
) -> None:
    try:
        result = predicate(*args, **kwargs)
    except AssertionError:
        raise
    except Exception as exc:
        msg = (
            f"{kind} contract for {_qualname(func)} raised {type(exc).__name__}: {exc}"
        )
        raise AssertionError(msg) from exc
    outcome, detail = _normalize_contract_result(result)
    if outcome:
        return
    predicate_name = getattr(predicate, "__name__", repr(predicate))
    msg = (
        f"{kind} contract for {_qualname(func)} failed via {predicate_name}."
        f" Args={args!r} Kwargs={dict(kwargs)!r}"
    )
    if detail:
        msg = f"{msg} Details: {detail}"
    raise AssertionError(msg)


def ensure(*predicates: ContractCallable) -> Callable[[Callable[P, R]], Callable[P, R]]:
    """Validate postconditions once the callable returns or raises.

    Predicates receive the call arguments plus either ``result=`` or
    ``exception=`` as a keyword argument.
    """

    if not predicates:
        raise ValueError("@ensure expects at least one predicate")

    def decorator(func: Callable[P, R]) -> Callable[P, R]:
        @wraps(func)
        def wrapped(*args: P.args, **kwargs: P.kwargs) -> R:
            if not dbc_active():
                return func(*args, **kwargs)

            try:
                result = func(*args, **kwargs)
            except Exception as exc:
                outcome: dict[str, object] = {"exception": exc}
                for predicate in predicates:
                    _evaluate_contract(
                        kind="ensure",
                        func=func,
                        predicate=predicate,
                        args=tuple(args),
                        kwargs={**kwargs, **outcome},
                    )
                raise

            for predicate in predicates:
                _evaluate_contract(
                    kind="ensure",
                    func=func,
                    predicate=predicate,
                    args=tuple(args),
                    kwargs={**kwargs, "result": result},
                )
            return result

        return wrapped

    return decorator


def invariant(*predicates: ContractCallable) -> Callable[[type[T]], type[T]]:
    """Check class invariants after ``__init__`` and around public methods."""

    if not predicates:
        raise ValueError("@invariant expects at least one predicate")

    def check(instance: object, func: Callable[..., object]) -> None:
        for predicate in predicates:
            _evaluate_contract(
                kind="invariant",
                func=func,
                predicate=predicate,
                args=(instance,),
                kwargs={},
            )

    def wrap_method(method: Callable[..., object]) -> Callable[..., object]:
        @wraps(method)
        def wrapper(self: object, *args: object, **kwargs: object) -> object:
            if not dbc_active():
                return method(self, *args, **kwargs)
            check(self, method)
            try:
                return method(self, *args, **kwargs)
            finally:
                check(self, method)

        return wrapper

    def decorator(cls: type[T]) -> type[T]:
        original_init = cls.__init__

        @wraps(original_init)
        def init_wrapper(self: object, *args: object, **kwargs: object) -> None:
            original_init(self, *args, **kwargs)
            if dbc_active():
                check(self, original_init)

        type.__setattr__(cls, "__init__", init_wrapper)
        for name, attribute in list(cls.__dict__.items()):
            if name.startswith("_") or not callable(attribute):
                continue
            if isinstance(attribute, (staticmethod, classmethod)):
                continue
            type.__setattr__(cls, name, wrap_method(attribute))
        return cls

    return decorator


_SNAPSHOT_SENTINEL = object()


def _snapshot(value: object) -> object:
    try:
        return copy.deepcopy(value)
    except Exception:
        return _SNAPSHOT_SENTINEL


def _violation(func: Callable[..., object], target: str) -> Callable[..., object]:
    def raiser(*args: object, **kwargs: object) -> object:
        msg = f"pure contract for {_qualname(func)} forbids calling {target}"
        raise AssertionError(msg)

    return raiser


@contextmanager
def _patch(obj: object, attribute: str, replacement: object) -> Iterator[None]:
    original = getattr(obj, attribute)
    setattr(obj, attribute, replacement)
    try:
        yield
    finally:
        setattr(obj, attribute, original)


@contextmanager
def _pure_environment(func: Callable[..., object]) -> Iterator[None]:
    with ExitStack() as stack:
        for obj, attribute, label in _IMPURE_TARGETS:
            stack.enter_context(_patch(obj, attribute, _violation(func, label)))
        yield


def pure(func: Callable[P, R]) -> Callable[P, R]:  # noqa: UP047
    """Validate that the wrapped callable neither mutates inputs nor the disk."""

    @wraps(func)
    def wrapped(*args: P.args, **kwargs: P.kwargs) -> R:
        if not dbc_active():
            return func(*args, **kwargs)

        snapshot_args = tuple(_snapshot(arg) for arg in args)
        snapshot_kwargs = {key: _snapshot(value) for key, value in kwargs.items()}

        with _pure_environment(func):
            result = func(*args, **kwargs)

        for index, (original, snapshot) in enumerate(zip(args, snapshot_args)):
            if snapshot is not _SNAPSHOT_SENTINEL and original != snapshot:
                msg = (
                    f"pure contract for {_qualname(func)} detected mutation of "
                    f"positional argument {index}"
                )
                raise AssertionError(msg)
        for key, snapshot in snapshot_kwargs.items():
            if snapshot is not _SNAPSHOT_SENTINEL and kwargs[key] != snapshot:
                msg = (
                    f"pure contract for {_qualname(func)} detected mutation of "
                    f"keyword argument '{key}'"
                )
                raise AssertionError(msg)
        return result

    return wrapped


__all__ = [
    "ContractResult",
    "InvalidStateError",
    "StateError",
    "StateMachineSpec",
    "TransitionSpec",
    "dbc_active",
    "dbc_enabled",
    "disable_dbc",
    "enable_dbc",
    "ensure",
    "extract_state_machine",
    "in_state",
    "invariant",
    "pure",
    "state_machine",
    "transition",
]
