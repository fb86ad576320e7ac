from collections import Counter
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from .config import (
    DEFAULT_GROUP_SIZE,
    DEFAULT_PLANT_BASED_MAXIMUM,
    DEFAULT_SAME_GENDER_PERCENTAGE_LIMIT,
    DEFAULT_SAME_NATIONALITY_MAXIMUM,
)


Gender = Literal["Male", "Female", "Other"]

University = Literal["UG", "Hanze", "Other"]

StudyDuration = Literal[
    "PhD",
    "FullMaster",
    "ExchangeMA",
    "FullBachelor",
    "Exchange1",
    "Exchange2",
    "Other",
]

Diet = Literal["None", "Pescatarian", "Vegetarian", "Vegan"]

MIXED = "Mixed"


def _yes_no(flag: bool) -> str:
    return "Yes" if flag else "No"


def _common_value(values: List[str]) -> Optional[str]:
    """Shared value of a non-empty list, "Mixed" if members disagree, None if empty."""
    if not values:
        return None
    first = values[0]
    for value in values:
        if value != first:
            return MIXED
    return first


class Participant(BaseModel):
    """
    Represents a single registered participant of the introduction event.

    Identity fields are carried through to the exports only; the grouping
    heuristic reads the categorical attributes.
    """

    first_name: str = ""
    last_name: str = ""
    email: str = ""
    phone_number: str = ""
    birth_date: Optional[str] = None
    gender: Gender = "Other"
    nationality: Optional[str] = None
    university: University = "Other"
    study_duration: StudyDuration = "Other"
    diet: Diet = "None"
    allergies: Optional[str] = None
    alcohol_free: bool = False
    requests_guide: bool = False
    can_guide: bool = False

    @property
    def name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def alcohol_type(self) -> str:
        return _yes_no(self.alcohol_free)

    @property
    def plant_based(self) -> bool:
        return self.diet != "None"


class Guide(BaseModel):
    """An introduction guide. Guides arrive pre-clustered by `cluster_id`."""

    cluster_id: int
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    phone_number: str = ""
    university: University = "Other"
    diet: Diet = "None"
    allergies: Optional[str] = None
    alcohol_free: bool = False

    @property
    def name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def alcohol_type(self) -> str:
        return _yes_no(self.alcohol_free)


class GuideCluster(BaseModel):
    """Guides sharing an import-time cluster id, matched to at most one group.

    `group_number` stays None until the cluster is committed to a group and
    never changes afterwards.
    """

    cluster_id: int
    guides: List[Guide] = Field(default_factory=list)
    group_number: Optional[int] = None

    @property
    def assigned(self) -> bool:
        return self.group_number is not None

    @property
    def alcohol_type(self) -> Optional[str]:
        return _common_value([g.alcohol_type for g in self.guides])

    def assign_to(self, group_number: int) -> None:
        if self.group_number is not None:
            raise ValueError(
                f"Guide cluster {self.cluster_id} is already assigned to group {self.group_number}."
            )
        self.group_number = group_number


class Group(BaseModel):
    """A finished group of participants with its optional guide cluster and theme."""

    group_number: int = Field(..., ge=1)
    participants: List[Participant] = Field(default_factory=list)
    guide_cluster: Optional[GuideCluster] = None
    theme: Optional[str] = None

    @property
    def size(self) -> int:
        return len(self.participants)

    @property
    def alcohol_type(self) -> Optional[str]:
        return _common_value([p.alcohol_type for p in self.participants])

    @property
    def university_type(self) -> Optional[str]:
        return _common_value([p.university for p in self.participants])

    @property
    def study_duration_type(self) -> Optional[str]:
        return _common_value([p.study_duration for p in self.participants])

    @property
    def number_of_plant_based_eaters(self) -> int:
        return sum(1 for p in self.participants if p.plant_based)

    def _nationality_counts(self) -> Counter:
        # Counter.most_common keeps first-inserted order among equal counts
        return Counter(p.nationality for p in self.participants)

    @property
    def max_same_nationality(self) -> int:
        counts = self._nationality_counts()
        if not counts:
            return 0
        return counts.most_common(1)[0][1]

    @property
    def most_common_nationality(self) -> Optional[str]:
        counts = self._nationality_counts()
        if not counts:
            return None
        return counts.most_common(1)[0][0]

    @property
    def max_same_gender_percentage(self) -> int:
        if not self.participants:
            return 0
        counts = Counter(p.gender for p in self.participants)
        largest = max(counts.values())
        # round half up, matching how percentages are shown to organisers
        return int(largest * 100 / len(self.participants) + 0.5)


class Settings(BaseModel):
    """Grouping settings.

    Only `group_size` steers the grouping itself; the other three are
    thresholds for the post-run warnings.
    """

    group_size: int = Field(default=DEFAULT_GROUP_SIZE, ge=1, le=40)
    plant_based_group_maximum: int = Field(default=DEFAULT_PLANT_BASED_MAXIMUM, ge=1, le=40)
    same_nationality_group_maximum: int = Field(default=DEFAULT_SAME_NATIONALITY_MAXIMUM, ge=1, le=40)
    same_gender_percentage_limit: int = Field(
        default=DEFAULT_SAME_GENDER_PERCENTAGE_LIMIT, ge=50, le=100
    )
