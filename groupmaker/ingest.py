from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Dict, List, Optional

import pandas as pd

from .data_models import Guide, GuideCluster, Participant
from .guides import separate_into_clusters


logger = logging.getLogger(__name__)


PARTICIPANT_FIELD_ALIASES: Dict[str, List[str]] = {
    "email": ["email", "Email", "E-mail", "Email address"],
    "first_name": ["first_name", "First name", "First Name"],
    "last_name": ["last_name", "Last name", "Last Name"],
    "gender": ["gender", "Gender"],
    "birth_date": ["birth_date", "Date of birth", "Birthdate"],
    "nationality": ["nationality", "Nationality"],
    "phone_number": ["phone_number", "Phone number", "Phone"],
    "university": ["university", "University"],
    "study_duration": ["study_duration", "Study duration"],
    "diet": ["diet", "Diet"],
    "allergies": ["allergies", "Diet (additional)", "Allergies"],
    "alcohol_free": ["alcohol_free", "Alcohol-free", "Alcohol free"],
    "requests_guide": ["requests_guide", "Requests Introduction Guide"],
    "can_guide": ["can_guide", "Group leader", "Can guide"],
}

GUIDE_FIELD_ALIASES: Dict[str, List[str]] = {
    "cluster_id": ["cluster_id", "Cluster", "Cluster number"],
    "first_name": ["first_name", "First name", "First Name"],
    "last_name": ["last_name", "Last name", "Last Name"],
    "phone_number": ["phone_number", "Phone number", "Phone"],
    "email": ["email", "Email", "E-mail"],
    "university": ["university", "University"],
    "alcohol_free": ["alcohol_free", "Alcohol-free", "Alcohol free"],
    "diet": ["diet", "Diet"],
    "allergies": ["allergies", "Allergies", "Diet (additional)"],
}

# Column positions in the raw registration exports, used when headers don't resolve
PARTICIPANT_COLUMN_POSITIONS: Dict[str, int] = {
    "email": 1,
    "first_name": 2,
    "last_name": 3,
    "gender": 4,
    "birth_date": 5,
    "nationality": 6,
    "phone_number": 7,
    "university": 8,
    "study_duration": 10,
    "diet": 11,
    "allergies": 12,
    "alcohol_free": 21,
    "requests_guide": 23,
    "can_guide": 24,
}

GUIDE_COLUMN_POSITIONS: Dict[str, int] = {
    "cluster_id": 0,
    "first_name": 2,
    "last_name": 3,
    "phone_number": 4,
    "email": 5,
    "university": 7,
    "alcohol_free": 12,
    "diet": 14,
    "allergies": 15,
}

REQUIRED_PARTICIPANT_FIELDS = {"gender", "university", "study_duration", "diet", "alcohol_free"}
REQUIRED_GUIDE_FIELDS = {"cluster_id"}

NO_ALLERGY_TOKENS = {"no", "none", "no restrictions", "nothing", "nope", "n/a", "na", "non", "nil", "-"}

GENDERS = {"male": "Male", "m": "Male", "female": "Female", "f": "Female"}

UNIVERSITIES = {
    "ug": "UG",
    "university_of_groningen": "UG",
    "university of groningen": "UG",
    "rug": "UG",
    "hanze": "Hanze",
    "hanze_university": "Hanze",
    "hanze university": "Hanze",
    "hanze university of applied sciences": "Hanze",
}

STUDY_DURATIONS = {
    "phd": "PhD",
    "full_master": "FullMaster",
    "fullmaster": "FullMaster",
    "full master": "FullMaster",
    "exchange_ma": "ExchangeMA",
    "exchangema": "ExchangeMA",
    "exchange ma": "ExchangeMA",
    "full_bachelor": "FullBachelor",
    "fullbachelor": "FullBachelor",
    "full bachelor": "FullBachelor",
    "exchange_1": "Exchange1",
    "exchange1": "Exchange1",
    "exchange 1": "Exchange1",
    "exchange_2": "Exchange2",
    "exchange2": "Exchange2",
    "exchange 2": "Exchange2",
}

DIETS = {
    "pescetarian": "Pescatarian",
    "pescatarian": "Pescatarian",
    "yes, pescetarian": "Pescatarian",
    "vegatarian": "Vegetarian",
    "vegetarian": "Vegetarian",
    "yes, vegetarian": "Vegetarian",
    "vegan": "Vegan",
    "yes, vegan": "Vegan",
}


def normalize_gender(value: str) -> str:
    return GENDERS.get(value.strip().lower(), "Other")


def normalize_university(value: str) -> str:
    return UNIVERSITIES.get(value.strip().lower(), "Other")


def normalize_study_duration(value: str) -> str:
    return STUDY_DURATIONS.get(value.strip().lower(), "Other")


def normalize_diet(value: str) -> str:
    return DIETS.get(value.strip().lower(), "None")


def normalize_flag(value: str) -> bool:
    s = value.strip()
    return s[:1].upper() == "Y" or s.lower() in {"true", "1"}


def normalize_allergies(value: str) -> Optional[str]:
    s = value.strip()
    if not s or s.lower() in NO_ALLERGY_TOKENS:
        return None
    return s


def normalize_optional(value: str) -> Optional[str]:
    s = value.strip()
    return s or None


PARTICIPANT_NORMALIZERS: Dict[str, Callable[[str], object]] = {
    "gender": normalize_gender,
    "university": normalize_university,
    "study_duration": normalize_study_duration,
    "diet": normalize_diet,
    "alcohol_free": normalize_flag,
    "requests_guide": normalize_flag,
    "can_guide": normalize_flag,
    "allergies": normalize_allergies,
    "birth_date": normalize_optional,
}

GUIDE_NORMALIZERS: Dict[str, Callable[[str], object]] = {
    "cluster_id": lambda v: int(v.strip()),
    "university": normalize_university,
    "diet": normalize_diet,
    "alcohol_free": normalize_flag,
    "allergies": normalize_allergies,
}


def clean_df(df: pd.DataFrame) -> pd.DataFrame:
    """Strip header whitespace, surrounding quotes and blank-ish cells."""
    out = df.copy()
    out.columns = [col.strip() if isinstance(col, str) else col for col in out.columns]
    for col in out.columns:
        out[col] = (
            out[col]
            .fillna("")
            .astype(str)
            .str.replace("\n", " ")
            .str.strip()
            .str.strip('"')
            .str.strip()
        )
    return out


def read_csv(path: Path) -> pd.DataFrame:
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Input CSV not found: {path}")
    df = pd.read_csv(path, dtype=str, keep_default_na=False)
    return clean_df(df)


def resolve_columns(
    df: pd.DataFrame,
    aliases: Dict[str, List[str]],
    positions: Dict[str, int],
) -> Dict[str, Optional[str]]:
    """Map each field to a column of `df`.

    Header aliases win. If none of the required-looking aliases match and the
    frame is as wide as the raw export, fall back to column positions.
    """
    resolved: Dict[str, Optional[str]] = {}
    for key, candidates in aliases.items():
        resolved[key] = next((c for c in candidates if c in df.columns), None)

    if not any(resolved.values()) and len(df.columns) > max(positions.values()):
        logger.info("No known headers found; reading columns by position")
        return {key: df.columns[pos] for key, pos in positions.items()}
    return resolved


def _records(
    df: pd.DataFrame,
    aliases: Dict[str, List[str]],
    positions: Dict[str, int],
    normalizers: Dict[str, Callable[[str], object]],
    required: set,
    source: str,
) -> List[Dict[str, object]]:
    columns = resolve_columns(df, aliases, positions)
    missing = sorted(key for key in required if columns.get(key) is None)
    if missing:
        raise KeyError(f"{source} is missing required columns: {missing}")

    records: List[Dict[str, object]] = []
    for row_number, (_, row) in enumerate(df.iterrows(), start=2):
        record: Dict[str, object] = {}
        for key, col in columns.items():
            if col is None:
                continue
            raw = str(row[col])
            normalize = normalizers.get(key)
            try:
                record[key] = normalize(raw) if normalize else raw
            except ValueError as exc:
                raise ValueError(f"{source} line {row_number}: bad value {raw!r} for {key}") from exc
        records.append(record)
    return records


def participants_from_df(df: pd.DataFrame, source: str = "participants") -> List[Participant]:
    records = _records(
        clean_df(df),
        PARTICIPANT_FIELD_ALIASES,
        PARTICIPANT_COLUMN_POSITIONS,
        PARTICIPANT_NORMALIZERS,
        REQUIRED_PARTICIPANT_FIELDS,
        source,
    )
    return [Participant(**r) for r in records]


def guides_from_df(df: pd.DataFrame, source: str = "guides") -> List[Guide]:
    records = _records(
        clean_df(df),
        GUIDE_FIELD_ALIASES,
        GUIDE_COLUMN_POSITIONS,
        GUIDE_NORMALIZERS,
        REQUIRED_GUIDE_FIELDS,
        source,
    )
    return [Guide(**r) for r in records]


def load_participants(path: Path) -> List[Participant]:
    """Read a participants CSV export into Participant records, in file order."""
    participants = participants_from_df(read_csv(path), source=str(path))
    logger.info("Loaded %d participants from %s", len(participants), path)
    return participants


def load_guide_clusters(path: Path) -> List[GuideCluster]:
    """Read a guides CSV and bundle the guides into clusters by cluster number."""
    guides = guides_from_df(read_csv(path), source=str(path))
    clusters = separate_into_clusters(guides)
    logger.info("Loaded %d guides in %d clusters from %s", len(guides), len(clusters), path)
    return clusters


def parse_themes(text: str) -> List[str]:
    """Themes are the comma-separated values of the first line.

    Positions are kept, so a blank entry leaves its group without a theme.
    Trailing blank entries are dropped.
    """
    lines = text.splitlines()
    if not lines:
        return []
    themes = [t.strip() for t in lines[0].split(",")]
    while themes and not themes[-1]:
        themes.pop()
    return themes


def load_themes(path: Path) -> List[str]:
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Themes file not found: {path}")
    themes = parse_themes(path.read_text(encoding="utf-8"))
    logger.info("Loaded %d themes from %s", len(themes), path)
    return themes
