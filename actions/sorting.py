"""
Default display order for climate actions.

Actions are ordered by status priority (work ready to be acted on first),
then by city, then by action name. The priority is a business ordering, not
alphabetical. Python's sort is stable, so records with identical keys keep
their input order and the result is reproducible.
"""

from collections.abc import Iterable

from actions.schema import Action, Status
from utils.strings import collation_key

STATUS_PRIORITY: dict[Status, int] = {
    Status.READY_TO_START: 1,
    Status.IN_PROGRESS: 2,
    Status.COMPLETED: 3,
    Status.NOT_STARTED: 4,
    Status.ON_HOLD: 5,
}


def sort_key(action: Action) -> tuple:
    return (
        STATUS_PRIORITY[action.status],
        collation_key(action.city),
        collation_key(action.action_name),
    )


def sort_actions(actions: Iterable[Action]) -> list[Action]:
    """Return a new list of *actions* in default display order."""
    return sorted(actions, key=sort_key)
