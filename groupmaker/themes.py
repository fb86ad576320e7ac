from typing import Optional, Sequence

from .data_models import Group


def theme_for(group_number: int, themes: Optional[Sequence[str]]) -> Optional[str]:
    """Theme of the 1-indexed group, or None when the list is too short or the entry is blank."""
    if not themes or group_number < 1 or len(themes) < group_number:
        return None
    return themes[group_number - 1] or None


def assign_theme(group: Group, themes: Optional[Sequence[str]]) -> Optional[str]:
    group.theme = theme_for(group.group_number, themes)
    return group.theme
