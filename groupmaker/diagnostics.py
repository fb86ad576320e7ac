"""Post-run warnings and pre-run resource checks.

Nothing here changes a grouping. The thresholds in Settings are only compared
against finished groups, and guide/theme shortages are reported as advice.
"""
from __future__ import annotations

import logging
from typing import Dict, List, Literal, Optional, Sequence

from pydantic import BaseModel, Field

from .data_models import Group, Settings
from .partition import number_of_groups


logger = logging.getLogger(__name__)

WarningAxis = Literal["diet", "nationality", "gender"]

AXIS_ORDER: List[WarningAxis] = ["diet", "nationality", "gender"]

AXIS_HEADINGS: Dict[str, str] = {
    "diet": "Warnings about too many plant-based eaters in groups:",
    "nationality": "Warnings about too many participants of the same nationality in groups:",
    "gender": "Warnings about gender imbalances in groups:",
}

UNKNOWN_NATIONALITY = "an unknown nationality"


class GroupWarning(BaseModel):
    """One threshold violation for one group on one axis."""

    axis: WarningAxis
    group_number: int
    value: int
    threshold: int
    nationality: Optional[str] = None

    @property
    def message(self) -> str:
        if self.axis == "diet":
            return f"{self.value} participants in Group {self.group_number} eat plant-based"
        if self.axis == "nationality":
            return f"{self.value} participants in Group {self.group_number} are from {self.nationality or UNKNOWN_NATIONALITY}"
        return f"{self.value}% of participants in Group {self.group_number} are of the same gender"


def diet_warning(group: Group, settings: Settings) -> Optional[GroupWarning]:
    count = group.number_of_plant_based_eaters
    if count > settings.plant_based_group_maximum:
        return GroupWarning(
            axis="diet",
            group_number=group.group_number,
            value=count,
            threshold=settings.plant_based_group_maximum,
        )
    return None


def nationality_warning(group: Group, settings: Settings) -> Optional[GroupWarning]:
    count = group.max_same_nationality
    if count > settings.same_nationality_group_maximum:
        return GroupWarning(
            axis="nationality",
            group_number=group.group_number,
            value=count,
            threshold=settings.same_nationality_group_maximum,
            nationality=group.most_common_nationality,
        )
    return None


def gender_warning(group: Group, settings: Settings) -> Optional[GroupWarning]:
    percentage = group.max_same_gender_percentage
    if percentage > settings.same_gender_percentage_limit:
        return GroupWarning(
            axis="gender",
            group_number=group.group_number,
            value=percentage,
            threshold=settings.same_gender_percentage_limit,
        )
    return None


def analyze_groups(groups: Sequence[Group], settings: Settings) -> List[GroupWarning]:
    """Check every finished group against the warning thresholds.

    Returns warnings ordered by axis (diet, nationality, gender) and then by
    group order, one entry per group per exceeded threshold.
    """
    checks = {
        "diet": diet_warning,
        "nationality": nationality_warning,
        "gender": gender_warning,
    }
    warnings: List[GroupWarning] = []
    for axis in AXIS_ORDER:
        for group in groups:
            warning = checks[axis](group, settings)
            if warning is not None:
                warnings.append(warning)
    if warnings:
        logger.info("%d group warning(s) over %d groups", len(warnings), len(groups))
    return warnings


class WarningReport(BaseModel):
    """Warnings of one run, grouped by axis for the run log."""

    warnings: List[GroupWarning] = Field(default_factory=list)

    @property
    def has_warnings(self) -> bool:
        return bool(self.warnings)

    def for_axis(self, axis: WarningAxis) -> List[GroupWarning]:
        return [w for w in self.warnings if w.axis == axis]

    @property
    def by_axis(self) -> Dict[str, List[GroupWarning]]:
        """Axes that have warnings, in diet, nationality, gender order."""
        grouped: Dict[str, List[GroupWarning]] = {}
        for axis in AXIS_ORDER:
            axis_warnings = self.for_axis(axis)
            if axis_warnings:
                grouped[axis] = axis_warnings
        return grouped

    def render(self) -> str:
        """Plain-text run log: a success line, then one section per axis with warnings."""
        lines = ["Run successful!", ""]
        if not self.warnings:
            lines.append("There were no warnings.")
            return "\n".join(lines)

        lines.append("There are warnings that you should take note of.")
        for axis, axis_warnings in self.by_axis.items():
            lines.append("")
            lines.append(AXIS_HEADINGS[axis])
            lines.extend(w.message for w in axis_warnings)
        return "\n".join(lines)


def render_log(warnings: Sequence[GroupWarning]) -> str:
    return WarningReport(warnings=list(warnings)).render()


def check_resource_quantities(
    num_participants: int,
    settings: Settings,
    num_guide_clusters: Optional[int] = None,
    num_themes: Optional[int] = None,
) -> List[str]:
    """Advisory messages when guide clusters or themes do not line up with the group count.

    A count of None means that input was not supplied and is not checked.
    """
    messages: List[str] = []
    if num_participants <= 0:
        return messages

    groups = number_of_groups(num_participants, settings.group_size)

    if num_guide_clusters is not None:
        if groups > num_guide_clusters:
            messages.append(
                f"The number of groups ({groups}) exceeds the number of guide clusters "
                f"({num_guide_clusters}). Some groups will not be assigned guides."
            )
        elif num_guide_clusters > groups:
            messages.append(
                f"The number of guide clusters ({num_guide_clusters}) exceeds the number of "
                f"groups ({groups}). Some guides will not be assigned a group."
            )

    if num_themes is not None and groups > num_themes:
        messages.append(
            f"The number of groups ({groups}) exceeds the number of themes ({num_themes}). "
            "Some groups will not be assigned a theme."
        )

    for message in messages:
        logger.debug(message)
    return messages
