"""Reconciliation planning.

Both planners are pure: they take the sorted catalog and the sorted list of
applied identifiers and return the ordered actions that bring the applied set
to a catalog prefix. Neither touches the database.

A target is ``None`` (reconcile fully), an identifier (stop once it has been
handled), or an ``int`` step count relative to the topmost applied
identifier. Targets that cannot be found never match, which silently widens
the plan to the whole catalog.
"""
from __future__ import annotations

from typing import Sequence, Union

from migraplan.schemas import DOWN, UP, Action

Target = Union[str, int, None]


def _is_step_count(to: Target) -> bool:
    return isinstance(to, int) and not isinstance(to, bool)


def resolve_step_target(catalog: Sequence[str], applied: Sequence[str], steps: int) -> str | None:
    """Translate a step count into the catalog identifier it lands on.

    With nothing applied, bootstrapping always lands on the first catalog
    entry regardless of ``steps``. Otherwise the count is taken from the
    catalog position of the topmost applied identifier; a stale topmost
    entry or a position outside the catalog yields ``None`` (no bound).
    """
    if not applied:
        return catalog[0] if catalog else None

    try:
        index = list(catalog).index(applied[-1])
    except ValueError:
        return None

    position = index + steps
    if 0 <= position < len(catalog):
        return catalog[position]
    return None


def plan_up(catalog: Sequence[str], applied: Sequence[str], to: Target = None) -> list[Action]:
    if _is_step_count(to):
        to = resolve_step_target(catalog, applied, to)

    working = list(applied)
    positions = {version: i for i, version in enumerate(working)}
    plan: list[Action] = []

    for i, version in enumerate(catalog):
        if positions.get(version) != i:
            # Roll back everything sitting at or above this slot, then
            # install the missing entry in its place.
            while len(working) > i:
                top = working.pop()
                positions.pop(top, None)
                plan.append(Action(identifier=top, direction=DOWN))
            plan.append(Action(identifier=version, direction=UP))

        if to is not None and version == to:
            break

    return plan


def cancel_round_trip(plan: list[Action]) -> list[Action]:
    """Remove the first symmetric ``up ... down`` block from ``plan``.

    Around each boundary ``i | i+1`` the window grows while the action on the
    left is an ``up`` and its mirror on the right is a ``down`` of the same
    identifier. The first boundary with a non-empty window is cut out and the
    scan stops there; later round trips are left in place.
    """
    for i in range(len(plan)):
        count = 0
        while (
            i - count >= 0
            and i + count + 1 < len(plan)
            and plan[i - count].direction == UP
            and plan[i + count + 1].direction == DOWN
            and plan[i - count].identifier == plan[i + count + 1].identifier
        ):
            count += 1

        if count > 0:
            return plan[: i - count + 1] + plan[i + count + 1 :]

    return plan


def plan_down(catalog: Sequence[str], applied: Sequence[str], to: Target = None) -> list[Action]:
    if _is_step_count(to):
        to = resolve_step_target(catalog, applied, -to)

    plan = plan_up(catalog, applied)

    for version in reversed(catalog):
        if to is not None and version == to:
            break
        plan.append(Action(identifier=version, direction=DOWN))

    return cancel_round_trip(plan)
