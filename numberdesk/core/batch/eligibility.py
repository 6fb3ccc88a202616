"""Split a selection into the numbers an action may and may not touch."""

from typing import AbstractSet, NamedTuple, Tuple

from numberdesk.core.models.phone_number import PhoneNumberId, ResourceSnapshot

from .actions import ActionKind


class EligibilitySplit(NamedTuple):
    """Eligible and ineligible ids, both in snapshot order."""

    eligible: Tuple[PhoneNumberId, ...]
    ineligible: Tuple[PhoneNumberId, ...]


def filter_selection(
    selection: AbstractSet[PhoneNumberId],
    snapshot: ResourceSnapshot,
    action: ActionKind,
) -> EligibilitySplit:
    """Partition ``selection`` by ``action``'s eligibility rule.

    Ids that are selected but missing from ``snapshot`` appear in neither
    output.
    """
    eligible = []
    ineligible = []
    rule = action.rule

    for number in snapshot:
        if number.id not in selection:
            continue
        if rule.allows(number.status):
            eligible.append(number.id)
        else:
            ineligible.append(number.id)

    return EligibilitySplit(tuple(eligible), tuple(ineligible))
