import logging

from groupmaker.data_models import Group, Participant, Settings
from groupmaker.diagnostics import (
    WarningReport,
    analyze_groups,
    check_resource_quantities,
    render_log,
)


SETTINGS = Settings(group_size=16, plant_based_group_maximum=5, same_nationality_group_maximum=4, same_gender_percentage_limit=75)


def _group(number, people):
    return Group(group_number=number, participants=[Participant(**p) for p in people])


def _balanced(n):
    nationalities = ["Dutch", "German", "Italian", "Greek"]
    genders = ["Male", "Female"]
    return [
        {"nationality": nationalities[i % 4], "gender": genders[i % 2], "diet": "None"}
        for i in range(n)
    ]


def test_group_statistics():
    group = _group(
        1,
        [
            {"nationality": "Dutch", "gender": "Male", "diet": "Vegan"},
            {"nationality": "Dutch", "gender": "Male", "diet": "None"},
            {"nationality": "Greek", "gender": "Female", "diet": "Vegetarian"},
        ],
    )
    assert group.number_of_plant_based_eaters == 2
    assert group.max_same_nationality == 2
    assert group.most_common_nationality == "Dutch"
    assert group.max_same_gender_percentage == 67


def test_empty_group_statistics():
    group = Group(group_number=1)
    assert group.number_of_plant_based_eaters == 0
    assert group.max_same_nationality == 0
    assert group.most_common_nationality is None
    assert group.max_same_gender_percentage == 0
    assert group.alcohol_type is None


def test_balanced_group_has_no_warnings():
    groups = [_group(1, _balanced(8)), _group(2, _balanced(12))]
    assert analyze_groups(groups, SETTINGS) == []
    assert "There were no warnings." in render_log([])


def test_each_axis_is_reported():
    plant_heavy = _group(1, [{"diet": "Vegan", "nationality": f"N{i}", "gender": ["Male", "Female"][i % 2]} for i in range(6)])
    same_country = _group(2, [{"nationality": "Dutch", "gender": ["Male", "Female"][i % 2]} for i in range(5)])
    skewed = _group(3, [{"gender": "Male", "nationality": f"N{i}"} for i in range(4)] + [{"gender": "Female", "nationality": "X"}])

    warnings = analyze_groups([plant_heavy, same_country, skewed], SETTINGS)

    assert [(w.axis, w.group_number, w.value) for w in warnings] == [
        ("diet", 1, 6),
        ("nationality", 2, 5),
        ("gender", 3, 80),
    ]
    assert warnings[1].nationality == "Dutch"
    assert warnings[0].message == "6 participants in Group 1 eat plant-based"
    assert warnings[1].message == "5 participants in Group 2 are from Dutch"
    assert warnings[2].message == "80% of participants in Group 3 are of the same gender"

    log = render_log(warnings)
    assert "There are warnings that you should take note of." in log
    assert "Warnings about too many plant-based eaters in groups:" in log
    assert "Warnings about gender imbalances in groups:" in log


def test_threshold_is_exclusive():
    at_limit = _group(1, [{"gender": "Male", "nationality": f"N{i}"} for i in range(3)] + [{"gender": "Female", "nationality": "X"}])
    assert at_limit.max_same_gender_percentage == 75
    assert analyze_groups([at_limit], SETTINGS) == []


def test_one_group_can_warn_on_several_axes():
    group = _group(4, [{"diet": "Vegan", "nationality": "Dutch", "gender": "Female"} for _ in range(6)])
    axes = [w.axis for w in analyze_groups([group], SETTINGS)]
    assert axes == ["diet", "nationality", "gender"]


def test_analysis_does_not_touch_groups():
    group = _group(1, _balanced(6))
    before = group.model_dump()
    analyze_groups([group], SETTINGS)
    assert group.model_dump() == before


def test_resource_quantity_messages():
    # 17 participants at size 16 -> 2 groups
    assert check_resource_quantities(17, SETTINGS, 2, 2) == []
    short = check_resource_quantities(17, SETTINGS, 1, None)
    assert len(short) == 1 and "Some groups will not be assigned guides" in short[0]
    surplus = check_resource_quantities(17, SETTINGS, 3, None)
    assert len(surplus) == 1 and "Some guides will not be assigned a group" in surplus[0]
    themes = check_resource_quantities(17, SETTINGS, None, 1)
    assert len(themes) == 1 and "Some groups will not be assigned a theme" in themes[0]
    assert check_resource_quantities(17, SETTINGS, None, 5) == []
    assert check_resource_quantities(0, SETTINGS, 0, 0) == []


def test_report_groups_warnings_by_axis():
    plant_heavy = _group(1, [{"diet": "Vegan", "nationality": f"N{i}", "gender": ["Male", "Female"][i % 2]} for i in range(6)])
    skewed = _group(2, [{"gender": "Male", "nationality": f"N{i}"} for i in range(5)])
    warnings = analyze_groups([plant_heavy, skewed], SETTINGS)

    report = WarningReport(warnings=warnings)

    assert report.has_warnings
    assert list(report.by_axis) == ["diet", "gender"]
    assert [w.group_number for w in report.for_axis("gender")] == [2]
    assert report.for_axis("nationality") == []
    assert report.render() == render_log(warnings)
    assert "Warnings about too many participants of the same nationality" not in report.render()


def test_empty_report():
    report = WarningReport()
    assert not report.has_warnings
    assert report.by_axis == {}
    assert report.render().endswith("There were no warnings.")


def test_missing_nationality_has_readable_message():
    group = _group(3, [{"nationality": "", "gender": ["Male", "Female"][i % 2]} for i in range(5)])
    (warning,) = analyze_groups([group], SETTINGS)
    assert warning.message == "5 participants in Group 3 are from an unknown nationality"


def test_resource_messages_are_not_logged_as_warnings(caplog):
    with caplog.at_level(logging.DEBUG, logger="groupmaker.diagnostics"):
        messages = check_resource_quantities(17, SETTINGS, 1, 1)
    assert len(messages) == 2
    assert all(r.levelno < logging.WARNING for r in caplog.records)
