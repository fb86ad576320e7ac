from groupmaker.data_models import Group
from groupmaker.themes import assign_theme, theme_for


THEMES = ["Pirates", "Space", "Jungle"]


def test_group_i_gets_theme_i():
    assert [theme_for(i, THEMES) for i in (1, 2, 3)] == THEMES


def test_no_theme_past_the_end():
    assert theme_for(4, THEMES) is None
    assert theme_for(1, []) is None
    assert theme_for(1, None) is None


def test_assign_theme_sets_group():
    group = Group(group_number=2)
    assert assign_theme(group, THEMES) == "Space"
    assert group.theme == "Space"
    late = Group(group_number=5)
    assert assign_theme(late, THEMES) is None
    assert late.theme is None


def test_blank_entry_means_no_theme():
    themes = ["Pirates", "", "Space"]
    assert [theme_for(i, themes) for i in (1, 2, 3)] == ["Pirates", None, "Space"]
