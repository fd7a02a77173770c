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

"""State machine transition decorators.

The current state is always tracked so objects can query it cheaply (for
example to make teardown idempotent). Rejecting calls from the wrong state
only happens while DbC checks are active.
"""

# pyright: reportImportCycles=false

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from functools import wraps
from typing import Any, ParamSpec, TypeVar

from ._errors import InvalidStateError

P = ParamSpec("P")
R = TypeVar("R")
T = TypeVar("T")
StateT = TypeVar("StateT", bound=Enum)


@dataclass(frozen=True, slots=True)
class TransitionSpec:
    """Specification of a single transition."""

    from_states: frozenset[Enum]
    to_state: Enum | None
    method_name: str


@dataclass(frozen=True, slots=True)
class StateMachineSpec:
    """Extracted state machine specification."""

    cls: type[Any]
    state_var: str
    states: type[Enum]
    initial: Enum
    transitions: tuple[TransitionSpec, ...] = field(default_factory=tuple)

    def to_mermaid(self) -> str:
        """Export as Mermaid state diagram."""
        lines = ["stateDiagram-v2", f"    [*] --> {self.initial.name}"]
        for t in sorted(self.transitions, key=lambda t: t.method_name):
            if t.to_state is None:
                continue
            lines.extend(
                f"    {source.name} --> {t.to_state.name}: {t.method_name}()"
                for source in sorted(t.from_states, key=lambda s: s.name)
            )
        return "\n".join(lines)


def _dbc_active() -> bool:
    from . import dbc_active

    return dbc_active()


def _spec_of(instance: object) -> StateMachineSpec:
    return type(instance).__state_machine_spec__  # type: ignore[attr-defined]


def _check_source(
    instance: object, method_name: str, valid: frozenset[Enum]
) -> None:
    if not valid or not _dbc_active():
        return
    spec = _spec_of(instance)
    current = getattr(instance, spec.state_var)
    if current not in valid:
        raise InvalidStateError(
            type(instance),
            method_name,
            current,
            tuple(sorted(valid, key=lambda s: s.name)),
        )


def _set_state(instance: object, state: Enum) -> None:
    object.__setattr__(instance, _spec_of(instance).state_var, state)


def state_machine(
    *,
    state_var: str,
    states: type[StateT],
    initial: StateT,
) -> Callable[[type[T]], type[T]]:
    """Class decorator that enables state machine tracking.

    Args:
        state_var: Name of the instance attribute holding current state.
        states: Enum class defining valid states.
        initial: Initial state, set before ``__init__`` runs.
    """
    if initial not in states:
        msg = f"Initial state {initial} not in states enum {states.__name__}"
        raise ValueError(msg)

    def decorator(cls: type[T]) -> type[T]:
        transitions = tuple(
            attr.__transition_spec__
            for name in dir(cls)
            if (attr := getattr(cls, name, None)) is not None
            and hasattr(attr, "__transition_spec__")
        )
        cls.__state_machine_spec__ = StateMachineSpec(  # type: ignore[attr-defined]
            cls=cls,
            state_var=state_var,
            states=states,
            initial=initial,
            transitions=transitions,
        )

        original_init = cls.__init__

        @wraps(original_init)
        def init_wrapper(self: T, *args: object, **kwargs: object) -> None:
            object.__setattr__(self, state_var, initial)
            original_init(self, *args, **kwargs)

        type.__setattr__(cls, "__init__", init_wrapper)
        return cls

    return decorator


def _declare(
    method_name: str, from_states: frozenset[Enum], to_state: Enum | None
) -> TransitionSpec:
    return TransitionSpec(
        from_states=from_states, to_state=to_state, method_name=method_name
    )


def transition(
    *,
    from_: StateT | tuple[StateT, ...],
    to: StateT,
) -> Callable[[Callable[P, R]], Callable[P, R]]:
    """Method decorator declaring a state transition.

    The target state is entered only when the method returns normally.
    """
    from_states: frozenset[Enum] = frozenset(
        (from_,) if isinstance(from_, Enum) else from_
    )

    def decorator(method: Callable[P, R]) -> Callable[P, R]:
        method_name = getattr(method, "__name__", repr(method))

        @wraps(method)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            _check_source(args[0], method_name, from_states)
            result = method(*args, **kwargs)
            _set_state(args[0], to)
            return result

        wrapper.__transition_spec__ = _declare(method_name, from_states, to)  # type: ignore[attr-defined]
        return wrapper

    return decorator


def in_state(
    *valid_states: Enum,
) -> Callable[[Callable[P, R]], Callable[P, R]]:
    """Method decorator requiring specific state(s) without transition."""
    if not valid_states:
        raise ValueError("@in_state requires at least one state")

    states_set = frozenset(valid_states)

    def decorator(method: Callable[P, R]) -> Callable[P, R]:
        method_name = getattr(method, "__name__", repr(method))

        @wraps(method)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            _check_source(args[0], method_name, states_set)
            return method(*args, **kwargs)

        wrapper.__transition_spec__ = _declare(method_name, states_set, None)  # type: ignore[attr-defined]
        return wrapper

    return decorator


def extract_state_machine(cls: type[Any]) -> StateMachineSpec:
    """Return the :class:`StateMachineSpec` attached by ``@state_machine``.

    Raises:
        AttributeError: If ``cls`` is not decorated with ``@state_machine``.
    """
    return cls.__state_machine_spec__


__all__ = [
    "StateMachineSpec",
    "TransitionSpec",
    "extract_state_machine",
    "in_state",
    "state_machine",
    "transition",
]
