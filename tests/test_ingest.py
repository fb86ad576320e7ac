from pathlib import Path

import pandas as pd
import pytest

from groupmaker.ingest import (
    load_guide_clusters,
    load_participants,
    load_themes,
    parse_themes,
)
from groupmaker.scoring import ScoreWeights, base_compatibility
from groupmaker.synthetic import generate_participants, roster_frame


def _write(path: Path, rows, columns) -> Path:
    pd.DataFrame(rows, columns=columns).to_csv(path, index=False)
    return path


PARTICIPANT_COLUMNS = [
    "Email", "First name", "Last name", "Gender", "Nationality", "Phone number",
    "University", "Study duration", "Diet", "Diet (additional)", "Alcohol-free",
]


def test_participants_are_normalized(tmp_path):
    path = _write(
        tmp_path / "participants.csv",
        [
            ["a@x.org", "Ann", "Smit", "female", "Dutch", "0612", "university_of_groningen", "full_master", "vegatarian", "none", "Yes"],
            ["b@x.org", "Bo", "Li", "male", "", "0613", "hanze_university", "exchange_1", "pescetarian", "nuts", "No"],
            ["c@x.org", "Cy", "Ro", "x", "Greek", "0614", "elsewhere", "something", "", "n/a", ""],
        ],
        PARTICIPANT_COLUMNS,
    )

    people = load_participants(path)

    assert [p.first_name for p in people] == ["Ann", "Bo", "Cy"]
    ann, bo, cy = people
    assert (ann.gender, ann.university, ann.study_duration, ann.diet) == ("Female", "UG", "FullMaster", "Vegetarian")
    assert ann.alcohol_free is True and ann.allergies is None
    assert (bo.gender, bo.university, bo.study_duration, bo.diet) == ("Male", "Hanze", "Exchange1", "Pescatarian")
    assert bo.nationality == "" and bo.allergies == "nuts" and bo.alcohol_free is False
    assert (cy.gender, cy.university, cy.study_duration, cy.diet) == ("Other", "Other", "Other", "None")


def test_missing_required_column(tmp_path):
    path = _write(tmp_path / "bad.csv", [["a@x.org", "Ann"]], ["Email", "First name"])
    with pytest.raises(KeyError):
        load_participants(path)


def test_missing_file():
    with pytest.raises(FileNotFoundError):
        load_participants(Path("does/not/exist.csv"))


def test_raw_export_is_read_by_position(tmp_path):
    row = [""] * 25
    row[1], row[2], row[3], row[4] = "a@x.org", "Ann", "Smit", "female"
    row[6], row[8], row[10], row[11] = "Dutch", "hanze_university", "phd", "vegan"
    row[21], row[23], row[24] = "Yes", "Yes", "No"
    path = _write(tmp_path / "raw.csv", [row], [f"col{i}" for i in range(25)])

    (ann,) = load_participants(path)

    assert ann.email == "a@x.org"
    assert (ann.gender, ann.university, ann.study_duration, ann.diet) == ("Female", "Hanze", "PhD", "Vegan")
    assert ann.alcohol_free and ann.requests_guide and not ann.can_guide


def test_synthetic_roster_round_trips(tmp_path):
    people = generate_participants(12, seed=5)
    path = tmp_path / "synthetic.csv"
    roster_frame(people).to_csv(path, index=False)

    loaded = load_participants(path)

    keys = ["gender", "nationality", "university", "study_duration", "diet", "alcohol_free", "email"]
    assert [p.model_dump(include=set(keys)) for p in loaded] == [p.model_dump(include=set(keys)) for p in people]


def test_guides_are_clustered(tmp_path):
    path = _write(
        tmp_path / "guides.csv",
        [
            ["2", "Ann", "a@x.org", "University of Groningen", "Yes", "Yes, vegan"],
            ["1", "Bo", "b@x.org", "Hanze University of Applied Sciences", "No", "No"],
            ["2", "Cy", "c@x.org", "Somewhere", "No", "Yes, pescetarian"],
        ],
        ["Cluster", "First name", "Email", "University", "Alcohol-free", "Diet"],
    )

    clusters = load_guide_clusters(path)

    assert [c.cluster_id for c in clusters] == [2, 1]
    assert [g.first_name for g in clusters[0].guides] == ["Ann", "Cy"]
    assert clusters[0].alcohol_type == "Mixed"
    assert clusters[1].alcohol_type == "No"
    ann, cy = clusters[0].guides
    assert (ann.university, ann.diet) == ("UG", "Vegan")
    assert (cy.university, cy.diet) == ("Other", "Pescatarian")
    assert clusters[1].guides[0].university == "Hanze"


def test_bad_cluster_number(tmp_path):
    path = _write(tmp_path / "guides.csv", [["one", "Ann"]], ["Cluster", "First name"])
    with pytest.raises(ValueError):
        load_guide_clusters(path)


def test_themes_come_from_first_line(tmp_path):
    path = tmp_path / "themes.csv"
    path.write_text("Pirates, Space ,Jungle\nignored,line\n", encoding="utf-8")
    assert load_themes(path) == ["Pirates", "Space", "Jungle"]
    assert parse_themes("") == []


def test_blank_theme_keeps_later_positions():
    themes = parse_themes("Pirates,,Space\n")
    assert themes == ["Pirates", "", "Space"]
    assert parse_themes("Pirates, Space,,\n") == ["Pirates", "Space"]


def test_blank_nationality_does_not_add_to_score(tmp_path):
    row = ["a@x.org", "Ann", "Smit", "female", "", "0612", "hanze_university", "phd", "", "", "No"]
    path = _write(tmp_path / "participants.csv", [row, row], PARTICIPANT_COLUMNS)

    first, second = load_participants(path)

    assert first.nationality == ""
    # university 300 + alcohol 200 + study duration 100, both diets None -1
    assert base_compatibility(second, [first], ScoreWeights(jitter_high=0)) == 599
