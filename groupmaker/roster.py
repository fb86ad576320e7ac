from __future__ import annotations

from typing import Dict, List, Optional, Sequence

from .data_models import Participant


class Roster:
    """Assignment state for one grouping run.

    Participants are addressed by their index in the input sequence. The
    unassigned pool keeps roster order, which is what makes "first seen wins"
    tie-breaking well defined. Assignments are write-once.
    """

    def __init__(self, participants: Sequence[Participant]):
        self._participants: List[Participant] = list(participants)
        self._unassigned: List[int] = list(range(len(self._participants)))
        self._assigned: Dict[int, int] = {}

    def __len__(self) -> int:
        return len(self._participants)

    def participant(self, index: int) -> Participant:
        return self._participants[index]

    @property
    def participants(self) -> List[Participant]:
        return list(self._participants)

    @property
    def unassigned(self) -> List[int]:
        return list(self._unassigned)

    @property
    def remaining(self) -> int:
        return len(self._unassigned)

    @property
    def exhausted(self) -> bool:
        return not self._unassigned

    def group_number_of(self, index: int) -> Optional[int]:
        return self._assigned.get(index)

    def assign(self, index: int, group_number: int) -> None:
        if index in self._assigned:
            raise ValueError(
                f"Participant {index} is already assigned to group {self._assigned[index]}."
            )
        # ValueError from list.remove also covers unknown indices
        self._unassigned.remove(index)
        self._assigned[index] = group_number

    def snapshot(self) -> Dict[int, int]:
        """Copy of participant index -> group number for every assigned participant."""
        return dict(self._assigned)
