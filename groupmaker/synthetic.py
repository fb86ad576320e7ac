"""Generate synthetic rosters for demos and tests.

The columns written by `roster_frame` / `guides_frame` use the same headers the
importer understands, so a synthetic CSV can be fed straight back to `run`.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional

import numpy as np
import pandas as pd
import shortuuid

from .data_models import Guide, GuideCluster, Participant
from .guides import separate_into_clusters


FIRST_NAMES = [
    "Anna", "Lucas", "Sofia", "Mateo", "Emma", "Noah", "Mia", "Liam", "Lea", "Jonas",
    "Chloe", "Ahmed", "Yuki", "Priya", "Chen", "Olga", "Diego", "Fatima", "Lars", "Ines",
]
LAST_NAMES = [
    "de Vries", "Rossi", "Garcia", "Müller", "Kowalski", "Nguyen", "Smith", "Silva",
    "Jansen", "Novak", "Kim", "Haddad", "Larsen", "Dubois", "Popescu", "Tanaka",
]
NATIONALITIES = [
    "Dutch", "German", "Italian", "Spanish", "French", "Polish", "Chinese", "Indian",
    "Greek", "Romanian", "Turkish", "American", "Brazilian", "Indonesian", "Swedish",
]

GENDERS = (["Male", "Female", "Other"], [0.47, 0.49, 0.04])
UNIVERSITIES = (["UG", "Hanze", "Other"], [0.65, 0.3, 0.05])
STUDY_DURATIONS = (
    ["PhD", "FullMaster", "ExchangeMA", "FullBachelor", "Exchange1", "Exchange2", "Other"],
    [0.05, 0.3, 0.1, 0.25, 0.15, 0.1, 0.05],
)
DIETS = (["None", "Pescatarian", "Vegetarian", "Vegan"], [0.7, 0.07, 0.15, 0.08])


def _pick(rng: np.random.Generator, choices: tuple) -> str:
    values, probs = choices
    return str(rng.choice(values, p=probs))


def _email(first: str, last: str) -> str:
    local = f"{first}.{last}".lower().replace(" ", "")
    return f"{local}.{shortuuid.ShortUUID().random(length=6)}@example.org"


def generate_participants(num_participants: int, seed: Optional[int] = None) -> List[Participant]:
    """Random participants with plausible attribute frequencies.

    Categorical attributes are reproducible for a given seed; email suffixes are not.
    """
    rng = np.random.default_rng(seed)
    participants: List[Participant] = []
    for _ in range(num_participants):
        first = str(rng.choice(FIRST_NAMES))
        last = str(rng.choice(LAST_NAMES))
        participants.append(
            Participant(
                first_name=first,
                last_name=last,
                email=_email(first, last),
                phone_number=f"+316{int(rng.integers(10_000_000, 99_999_999))}",
                gender=_pick(rng, GENDERS),
                nationality=str(rng.choice(NATIONALITIES)),
                university=_pick(rng, UNIVERSITIES),
                study_duration=_pick(rng, STUDY_DURATIONS),
                diet=_pick(rng, DIETS),
                alcohol_free=bool(rng.random() < 0.2),
                requests_guide=bool(rng.random() < 0.5),
                can_guide=bool(rng.random() < 0.1),
            )
        )
    return participants


def generate_guide_clusters(
    num_clusters: int,
    guides_per_cluster: int = 2,
    seed: Optional[int] = None,
) -> List[GuideCluster]:
    rng = np.random.default_rng(seed)
    guides: List[Guide] = []
    for cluster_id in range(1, num_clusters + 1):
        for _ in range(guides_per_cluster):
            first = str(rng.choice(FIRST_NAMES))
            last = str(rng.choice(LAST_NAMES))
            guides.append(
                Guide(
                    cluster_id=cluster_id,
                    first_name=first,
                    last_name=last,
                    email=_email(first, last),
                    phone_number=f"+316{int(rng.integers(10_000_000, 99_999_999))}",
                    university=_pick(rng, UNIVERSITIES),
                    diet=_pick(rng, DIETS),
                    alcohol_free=bool(rng.random() < 0.25),
                )
            )
    return separate_into_clusters(guides)


def roster_frame(participants: List[Participant]) -> pd.DataFrame:
    rows: List[Dict[str, Any]] = [
        {
            "First name": p.first_name,
            "Last name": p.last_name,
            "Email": p.email,
            "Phone number": p.phone_number,
            "Gender": p.gender,
            "Nationality": p.nationality or "",
            "University": p.university,
            "Study duration": p.study_duration,
            "Diet": p.diet,
            "Alcohol-free": "Yes" if p.alcohol_free else "No",
            "Requests Introduction Guide": "Yes" if p.requests_guide else "No",
            "Group leader": "Yes" if p.can_guide else "No",
        }
        for p in participants
    ]
    return pd.DataFrame(rows)


def guides_frame(clusters: List[GuideCluster]) -> pd.DataFrame:
    rows: List[Dict[str, Any]] = [
        {
            "Cluster": cluster.cluster_id,
            "First name": g.first_name,
            "Last name": g.last_name,
            "Email": g.email,
            "Phone number": g.phone_number,
            "University": g.university,
            "Diet": g.diet,
            "Alcohol-free": "Yes" if g.alcohol_free else "No",
        }
        for cluster in clusters
        for g in cluster.guides
    ]
    return pd.DataFrame(rows)
