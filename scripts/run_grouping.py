"""Run the grouping pipeline on the CSV files configured below.

Pseudocode:
1) Configure input paths (edit the constants as needed)
2) Load settings, participants, guide clusters and themes
3) Run groupmaker.engine.form_groups
4) Write outputs to OUTPUT_DIR and print the warnings log
"""

from __future__ import annotations

from pathlib import Path
import os
import sys

import numpy as np

# Ensure project root (parent of scripts/) is on sys.path for package imports
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from groupmaker.config import load_settings
from groupmaker.diagnostics import check_resource_quantities, render_log
from groupmaker.engine import form_groups
from groupmaker.export import write_outputs
from groupmaker.ingest import load_guide_clusters, load_participants, load_themes


# Edit these paths to point at the exports you want to group
PARTICIPANTS_CSV = Path("data/participants.csv")
GUIDES_CSV = Path("data/guides.csv")
THEMES_FILE = Path("data/themes.csv")
MAIL_TEMPLATE = Path("data/mail_template.md")
OUTPUT_DIR = Path("data/output")


def main() -> None:
    """Entry point to run the grouping pipeline.

    Guides, themes and the mail template are optional and skipped when their
    file does not exist.

    Raises:
        FileNotFoundError: If the participants CSV does not exist.
    """
    if not PARTICIPANTS_CSV.exists():
        raise FileNotFoundError(f"Input CSV not found: {PARTICIPANTS_CSV}")

    print("[1/4] Loading settings and inputs...")
    settings = load_settings()
    participants = load_participants(PARTICIPANTS_CSV)
    clusters = load_guide_clusters(GUIDES_CSV) if GUIDES_CSV.exists() else None
    themes = load_themes(THEMES_FILE) if THEMES_FILE.exists() else None
    print(
        f"       {len(participants)} participants, "
        f"{len(clusters) if clusters is not None else 0} guide clusters, "
        f"{len(themes) if themes is not None else 0} themes (group size {settings.group_size})."
    )
    for message in check_resource_quantities(
        len(participants),
        settings,
        len(clusters) if clusters is not None else None,
        len(themes) if themes is not None else None,
    ):
        print(f"Warning: {message}")

    seed = os.environ.get("GROUPMAKER_SEED")
    print(f"[2/4] Forming groups (seed={seed})...")
    result = form_groups(
        participants,
        settings,
        guide_clusters=clusters,
        themes=themes,
        rng=np.random.default_rng(int(seed) if seed else None),
    )
    print(f"       Formed {len(result.groups)} groups.")

    print(f"[3/4] Writing outputs to {OUTPUT_DIR}...")
    template = MAIL_TEMPLATE.read_text(encoding="utf-8") if MAIL_TEMPLATE.exists() else None
    written = write_outputs(result, OUTPUT_DIR, mail_template=template)
    print(f"       Wrote {len(written)} files.")

    print("[4/4] Run log:")
    print(render_log(result.warnings))


if __name__ == "__main__":
    try:
        main()
    except Exception as exc:
        print(f"Error: {exc}")
        sys.exit(1)
