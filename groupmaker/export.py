"""Write grouping results for organisers.

Produces, in an output folder:

- participants-matched.csv: every participant with its group number
- guides-matched.csv: every guide with its cluster's group number (blank if unmatched)
- groups.csv: one row per group with composition figures
- run_report.md: Markdown overview plus the warnings log
- group<N>.md: optional per-group mails rendered from a template

No grouping logic lives here; everything is read from a GroupingResult.
"""
from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import pandas as pd

from .config import (
    GROUPS_CSV,
    GUIDES_MATCHED_CSV,
    MAIL_FILENAME_TEMPLATE,
    PARTICIPANTS_MATCHED_CSV,
    RUN_REPORT_MD,
)
from .data_models import Group, Guide, GuideCluster, Participant
from .diagnostics import render_log
from .engine import GroupingResult


logger = logging.getLogger(__name__)


def _yes_no(flag: bool) -> str:
    return "Yes" if flag else "No"


def participants_frame(result: GroupingResult) -> pd.DataFrame:
    rows: List[Dict[str, Any]] = []
    for group in result.groups:
        for p in group.participants:
            rows.append(
                {
                    "Group number": group.group_number,
                    "First name": p.first_name,
                    "Last name": p.last_name,
                    "Email": p.email,
                    "Phone number": p.phone_number,
                    "Gender": p.gender,
                    "Nationality": p.nationality or "",
                    "Date of birth": p.birth_date or "",
                    "University": p.university,
                    "Study duration": p.study_duration,
                    "Diet": p.diet,
                    "Diet (additional)": p.allergies or "",
                    "Alcohol-free": _yes_no(p.alcohol_free),
                    "Requests Introduction Guide": _yes_no(p.requests_guide),
                    "Group leader": _yes_no(p.can_guide),
                }
            )
    return pd.DataFrame(rows)


def guides_frame(clusters: Sequence[GuideCluster]) -> pd.DataFrame:
    rows: List[Dict[str, Any]] = []
    for cluster in clusters:
        for g in cluster.guides:
            rows.append(
                {
                    "Group number": cluster.group_number if cluster.group_number is not None else "",
                    "Cluster": cluster.cluster_id,
                    "First name": g.first_name,
                    "Last name": g.last_name,
                    "Email": g.email,
                    "Phone number": g.phone_number,
                    "University": g.university,
                    "Diet": g.diet,
                    "Diet (additional)": g.allergies or "",
                    "Alcohol-free": _yes_no(g.alcohol_free),
                }
            )
    return pd.DataFrame(rows)


def groups_frame(groups: Sequence[Group]) -> pd.DataFrame:
    rows = [
        {
            "Group number": group.group_number,
            "Size": group.size,
            "Theme": group.theme or "",
            "Guide cluster": group.guide_cluster.cluster_id if group.guide_cluster else "",
            "Alcohol": group.alcohol_type or "",
            "University": group.university_type or "",
            "Study duration": group.study_duration_type or "",
            "Plant-based eaters": group.number_of_plant_based_eaters,
            "Most common nationality": group.most_common_nationality or "",
            "Max same nationality": group.max_same_nationality,
            "Max same gender %": group.max_same_gender_percentage,
        }
        for group in groups
    ]
    return pd.DataFrame(rows)


def render_markdown(result: GroupingResult) -> str:
    """Markdown overview of every group followed by the warnings log."""
    lines: List[str] = []
    ts = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    total = sum(group.size for group in result.groups)
    lines.append("# Grouping Report\n")
    lines.append(f"Generated: {ts}\n")
    lines.append(f"Participants: {total} in {len(result.groups)} groups\n")

    for group in result.groups:
        title = f"## Group {group.group_number}"
        if group.theme:
            title += f": {group.theme}"
        lines.append(title + "\n")
        lines.append(
            f"Size {group.size} | alcohol {group.alcohol_type or '-'} | "
            f"{group.number_of_plant_based_eaters} plant-based | "
            f"max {group.max_same_gender_percentage}% same gender\n"
        )
        if group.guide_cluster is not None:
            names = ", ".join(g.name for g in group.guide_cluster.guides) or "-"
            lines.append(f"Guides (cluster {group.guide_cluster.cluster_id}): {names}\n")
        lines.append(participants_table(group.participants))
        lines.append("")

    lines.append("## Warnings\n")
    lines.append(render_log(result.warnings))
    return "\n".join(lines)


def _table(headers: List[str], rows: List[List[str]]) -> str:
    out = ["| " + " | ".join(headers) + " |", "|" + "---|" * len(headers)]
    for row in rows:
        out.append("| " + " | ".join(cell.replace("|", "/") for cell in row) + " |")
    return "\n".join(out)


def participants_table(participants: Sequence[Participant]) -> str:
    return _table(
        ["Name", "Email", "Phone number", "Nationality", "Alcohol-free", "Dietary preferences", "Other preferences / allergies"],
        [
            [
                p.name,
                p.email,
                p.phone_number,
                p.nationality or "",
                _yes_no(p.alcohol_free),
                p.diet,
                p.allergies or "",
            ]
            for p in participants
        ],
    )


def guides_table(guides: Sequence[Guide]) -> str:
    return _table(
        ["Name", "Email", "Phone number"],
        [[g.name, g.email, g.phone_number] for g in guides],
    )


def render_mail(template: str, group: Group) -> str:
    """Fill a mail template for one group.

    Placeholders: [group number], [theme], and [guides] / [participants],
    which are replaced by Markdown tables.
    """
    guides = group.guide_cluster.guides if group.guide_cluster else []
    text = template.replace("[group number]", str(group.group_number))
    text = text.replace("[theme]", group.theme or "")
    text = text.replace("[guides]", guides_table(guides))
    text = text.replace("[participants]", participants_table(group.participants))
    return text


def write_outputs(
    result: GroupingResult,
    out_dir: Path,
    mail_template: Optional[str] = None,
) -> List[Path]:
    """Write all CSV/Markdown outputs to `out_dir` and return the written paths."""
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    written: List[Path] = []

    participants_path = out_dir / PARTICIPANTS_MATCHED_CSV
    participants_frame(result).to_csv(participants_path, index=False)
    written.append(participants_path)

    if result.guide_clusters:
        guides_path = out_dir / GUIDES_MATCHED_CSV
        guides_frame(result.guide_clusters).to_csv(guides_path, index=False)
        written.append(guides_path)

    groups_path = out_dir / GROUPS_CSV
    groups_frame(result.groups).to_csv(groups_path, index=False)
    written.append(groups_path)

    report_path = out_dir / RUN_REPORT_MD
    report_path.write_text(render_markdown(result), encoding="utf-8")
    written.append(report_path)

    if mail_template is not None:
        for group in result.groups:
            mail_path = out_dir / MAIL_FILENAME_TEMPLATE.format(number=group.group_number)
            mail_path.write_text(render_mail(mail_template, group), encoding="utf-8")
            written.append(mail_path)

    logger.info("Wrote %d output files to %s", len(written), out_dir)
    return written
