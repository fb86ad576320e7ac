from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

import numpy as np
import typer
from rich import print
from rich.table import Table

from .config import load_settings
from .data_models import GuideCluster, Settings
from .diagnostics import check_resource_quantities
from .engine import GroupingResult, form_groups
from .export import write_outputs
from .ingest import load_guide_clusters, load_participants, load_themes
from .partition import plan_slot_sizes
from .synthetic import generate_guide_clusters, generate_participants, guides_frame, roster_frame


app = typer.Typer(help="Introduction week group maker CLI")


def _configure_logging(verbose: bool) -> None:
	logging.basicConfig(
		level=logging.DEBUG if verbose else logging.WARNING,
		format="%(levelname)s %(name)s: %(message)s",
	)


def _groups_table(result: GroupingResult) -> Table:
	table = Table("Group", "Size", "Theme", "Guides", "Alcohol", "Plant-based", "Top nationality", "Same gender %")
	for group in result.groups:
		cluster = group.guide_cluster
		table.add_row(
			str(group.group_number),
			str(group.size),
			group.theme or "",
			f"cluster {cluster.cluster_id}" if cluster else "-",
			group.alcohol_type or "",
			str(group.number_of_plant_based_eaters),
			f"{group.most_common_nationality or '-'} ({group.max_same_nationality})",
			str(group.max_same_gender_percentage),
		)
	return table


@app.command()
def run(
	participants_csv: Path = typer.Argument(..., help="Participants CSV export"),
	guides_csv: Optional[Path] = typer.Option(None, "--guides", help="Guides CSV with cluster numbers"),
	themes_file: Optional[Path] = typer.Option(None, "--themes", help="File whose first line lists the themes, comma-separated"),
	group_size: Optional[int] = typer.Option(None, help="Target group size"),
	plant_based_max: Optional[int] = typer.Option(None, help="Warn above this many plant-based eaters per group"),
	nationality_max: Optional[int] = typer.Option(None, help="Warn above this many participants of one nationality per group"),
	gender_limit: Optional[int] = typer.Option(None, help="Warn above this same-gender percentage"),
	seed: Optional[int] = typer.Option(None, help="Seed for the tie-breaking jitter"),
	workers: int = typer.Option(1, help="Threads used to score candidates"),
	out_dir: Optional[Path] = typer.Option(None, help="Write CSV/Markdown outputs to this folder"),
	mail_template: Optional[Path] = typer.Option(None, help="Mail template with [group number], [theme], [guides], [participants]"),
	verbose: bool = typer.Option(False, "--verbose/--quiet", help="Log engine progress"),
):
	"""Form groups, assign guide clusters and themes, and report warnings."""
	_configure_logging(verbose)
	try:
		settings = load_settings(
			{
				"group_size": group_size,
				"plant_based_group_maximum": plant_based_max,
				"same_nationality_group_maximum": nationality_max,
				"same_gender_percentage_limit": gender_limit,
			}
		)
		participants = load_participants(participants_csv)
		clusters: Optional[List[GuideCluster]] = load_guide_clusters(guides_csv) if guides_csv else None
		themes = load_themes(themes_file) if themes_file else None
		template = mail_template.read_text(encoding="utf-8") if mail_template else None
	except (ValueError, KeyError, OSError) as exc:
		print(f"[red]Error:[/red] {exc}")
		raise typer.Exit(code=1)

	print(f"[green]Loaded[/green] {len(participants)} participants")
	for message in check_resource_quantities(
		len(participants),
		settings,
		len(clusters) if clusters is not None else None,
		len(themes) if themes is not None else None,
	):
		print(f"[yellow]Warning:[/yellow] {message}")

	try:
		result = form_groups(
			participants,
			settings,
			guide_clusters=clusters,
			themes=themes,
			rng=np.random.default_rng(seed),
			workers=workers,
		)
	except ValueError as exc:
		print(f"[red]Error:[/red] {exc}")
		raise typer.Exit(code=1)

	print(_groups_table(result))
	print(result.report.render())

	if out_dir:
		written = write_outputs(result, out_dir, mail_template=template)
		print(f"[green]Wrote {len(written)} files to[/green] {out_dir}")


@app.command()
def plan(
	num_participants: int = typer.Argument(..., help="Number of participants"),
	group_size: int = typer.Option(Settings().group_size, help="Target group size"),
):
	"""Show the group sizes a roster of this size would be split into."""
	try:
		sizes = plan_slot_sizes(num_participants, group_size)
	except ValueError as exc:
		print(f"[red]Error:[/red] {exc}")
		raise typer.Exit(code=1)
	table = Table("Group", "Size")
	for number, size in enumerate(sizes, start=1):
		table.add_row(str(number), str(size))
	print(table)
	print(f"[bold]{len(sizes)} groups[/bold] for {num_participants} participants")


@app.command()
def synth(
	num_participants: int = typer.Argument(..., help="Number of participants to generate"),
	out_path: Path = typer.Option(Path("synthetic_participants.csv"), help="Participants CSV to write"),
	guide_clusters: int = typer.Option(0, help="Also generate this many guide clusters"),
	guides_out: Path = typer.Option(Path("synthetic_guides.csv"), help="Guides CSV to write"),
	seed: Optional[int] = typer.Option(None, help="Seed for reproducible attributes"),
):
	"""Generate a synthetic roster in the import format."""
	participants = generate_participants(num_participants, seed=seed)
	roster_frame(participants).to_csv(out_path, index=False)
	print(f"[green]Wrote {len(participants)} participants to[/green] {out_path}")
	if guide_clusters > 0:
		clusters = generate_guide_clusters(guide_clusters, seed=seed)
		guides_frame(clusters).to_csv(guides_out, index=False)
		print(f"[green]Wrote {guide_clusters} guide clusters to[/green] {guides_out}")


if __name__ == "__main__":
	app()
