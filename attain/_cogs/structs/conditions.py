"""
Conditions as reported by the resources in their ``status.conditions``.

Every condition is a record of one aspect of the resource's readiness:
its type (e.g. ``"Ready"``), its status (``"True"``, ``"False"``, ``"Unknown"``),
and a machine-readable reason of the status (e.g. ``"Provisioning"``).

The conditions are extracted from the raw bodies as they are reported,
in their natural order, with no sorting or de-duplication on the client side.
"""
import collections.abc
import dataclasses
import datetime
from typing import List, Optional, Tuple

import iso8601

from attain._cogs.structs import bodies

# The key for matching a condition against the expectations: (type, status, reason).
ConditionTriple = Tuple[str, str, str]


class MalformedConditionsError(ValueError):
    """ Raised when the conditions cannot be decoded from the resource's status. """


@dataclasses.dataclass(frozen=True)
class Condition:
    type: str
    status: str
    reason: str = ''
    message: Optional[str] = None
    last_transition_time: Optional[datetime.datetime] = None

    @property
    def triple(self) -> ConditionTriple:
        return (self.type, self.status, self.reason)

    def __str__(self) -> str:
        ts = self.last_transition_time
        since = f" since {ts.isoformat()}" if ts else ""
        return f"{self.type}={self.status} ({self.reason or 'no reason'}){since}"


def extract_conditions(body: bodies.RawBody) -> List[Condition]:
    """
    Decode the resource's status block into a list of conditions.

    An absent status or absent conditions are not errors: the resource can be
    just created and not yet processed by its controller; the list is empty.

    Everything else that does not look like a list of conditions is treated
    as a malformed status: e.g., if it is fetched while being written.
    """
    if not isinstance(body, collections.abc.Mapping):
        raise MalformedConditionsError(f"The body is not a mapping: {body!r}")

    status = body.get('status') or {}
    if not isinstance(status, collections.abc.Mapping):
        raise MalformedConditionsError(f"The status is not a mapping: {status!r}")

    raw_conditions = status.get('conditions') or []
    if not isinstance(raw_conditions, collections.abc.Sequence) or isinstance(raw_conditions, str):
        raise MalformedConditionsError(f"The conditions are not a list: {raw_conditions!r}")

    return [_parse_condition(raw_condition) for raw_condition in raw_conditions]


def _parse_condition(raw_condition: bodies.RawCondition) -> Condition:
    if not isinstance(raw_condition, collections.abc.Mapping):
        raise MalformedConditionsError(f"The condition is not a mapping: {raw_condition!r}")

    try:
        type_ = raw_condition['type']
        status = raw_condition['status']
    except KeyError as e:
        raise MalformedConditionsError(f"The condition has no {e}: {raw_condition!r}") from e

    # A bad timestamp means a bad write, so the whole condition is not trusted.
    raw_time = raw_condition.get('lastTransitionTime')
    try:
        last_transition_time = iso8601.parse_date(raw_time) if raw_time else None
    except iso8601.ParseError as e:
        raise MalformedConditionsError(f"The condition has a bad timestamp: {raw_time!r}") from e

    return Condition(
        type=str(type_),
        status=str(status),
        reason=str(raw_condition.get('reason') or ''),
        message=raw_condition.get('message'),
        last_transition_time=last_transition_time,
    )
