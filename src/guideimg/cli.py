"""Guide image pipeline CLI."""

import json
from enum import Enum
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from guideimg.config import settings
from guideimg.log import setup_logging
from guideimg.models import Guide, PageSectionPlan, SectionImageMapping
from guideimg.pipeline import (
    ContentExtractor,
    HeadingDetector,
    ImagePipeline,
    PdfExtractionError,
    compare_image_counts,
    map_images_by_page_order,
    map_images_by_page_text,
    map_images_to_sections,
    pdf_likely_has_images,
    plan_page_sections,
)
from guideimg.storage import GCSImageStorage, LocalImageStorage

app = typer.Typer(
    name="guideimg",
    help="Attach photographs from sensory audit PDFs to venue guide areas",
    add_completion=False,
)
console = Console()


class Strategy(str, Enum):
    AUTO = "auto"
    PAGE_TEXT = "page-text"
    HEADINGS = "headings"
    PAGE_ORDER = "page-order"


def load_section_titles(path: Path) -> list[str]:
    """Section titles from a guide JSON or a list of ``{id, name}`` areas."""
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    areas = data.get("areas", []) if isinstance(data, dict) else data
    return [area["name"] if isinstance(area, dict) else str(area) for area in areas]


def print_mappings(mappings: list[SectionImageMapping]) -> None:
    table = Table(title="Images per section")
    table.add_column("Section")
    table.add_column("Images", justify="right")
    table.add_column("Pages")
    for mapping in mappings:
        pages = sorted({image.page for image in mapping.images})
        table.add_row(mapping.section_title, str(mapping.image_count), ", ".join(map(str, pages)))
    console.print(table)


def print_trace(plan: PageSectionPlan) -> None:
    table = Table(title="Page decisions")
    table.add_column("Page", justify="right")
    table.add_column("Rule")
    table.add_column("Section")
    table.add_column("Headings on page")
    for decision in plan.decisions:
        table.add_row(
            str(decision.page),
            decision.rule.value,
            decision.section or "-",
            ", ".join(decision.headings),
        )
    console.print(table)


@app.command()
def check(
    pdf_path: Path = typer.Argument(..., exists=True, help="Path to PDF file"),
) -> None:
    """Report whether a PDF is likely to contain images."""
    if pdf_likely_has_images(pdf_path.read_bytes()):
        console.print(f"[green]{pdf_path.name}: image markers found[/green]")
    else:
        console.print(f"[yellow]{pdf_path.name}: no image markers found[/yellow]")


@app.command("map")
def map_command(
    pdf_path: Path = typer.Argument(..., exists=True, help="Path to PDF file"),
    areas_path: Path = typer.Argument(..., exists=True, help="Guide JSON or list of areas"),
    strategy: Strategy = typer.Option(Strategy.AUTO, help="Assignment strategy"),
    expected: Optional[Path] = typer.Option(None, exists=True, help="JSON of expected image counts"),
    trace: bool = typer.Option(False, help="Show per-page decisions"),
) -> None:
    """Assign a PDF's images to sections without uploading anything."""
    setup_logging(settings.log_level)
    titles = load_section_titles(areas_path)

    try:
        content = ContentExtractor().extract(pdf_path.read_bytes())
    except PdfExtractionError as err:
        console.print(f"[red]{err}[/red]")
        raise typer.Exit(code=2)

    console.print(f"[bold blue]Pages:[/bold blue] {content.page_count}  [bold blue]Images:[/bold blue] {len(content.images)}")
    for warning in content.warnings:
        console.print(f"[yellow]{warning}[/yellow]")

    plan = None
    if strategy == Strategy.PAGE_ORDER:
        mappings = map_images_by_page_order(content.images, titles)
    elif strategy == Strategy.HEADINGS or (strategy == Strategy.AUTO and not content.page_texts):
        headings = HeadingDetector().detect(content.text_blocks)
        console.print(f"[dim]Detected {len(headings)} heading(s)[/dim]")
        mappings = map_images_to_sections(content.images, headings, titles)
    else:
        plan = plan_page_sections(content.page_texts, titles)
        mappings = map_images_by_page_text(content.images, content.page_texts, titles, plan=plan)

    print_mappings(mappings)
    if trace and plan is not None:
        print_trace(plan)

    if expected is not None:
        expected_counts = json.loads(expected.read_text(encoding="utf-8"))
        checks = compare_image_counts(mappings, expected_counts)
        for result in checks:
            mark = "[green]✓[/green]" if result.ok else "[red]✗[/red]"
            console.print(f"  {mark} {result.section}: {result.actual} (expected {result.expected})")
        if not all(result.ok for result in checks):
            console.print("[red]Mismatches found[/red]")
            raise typer.Exit(code=1)
        console.print("[green]All counts match[/green]")


@app.command()
def process(
    pdf_path: Path = typer.Argument(..., exists=True, help="Path to PDF file"),
    guide_path: Path = typer.Argument(..., exists=True, help="Guide JSON to attach images to"),
    venue_id: str = typer.Option(..., help="Venue id used in storage paths"),
    output_dir: Path = typer.Option(Path("./output"), help="Output directory"),
    bucket: Optional[str] = typer.Option(None, help="Upload to this GCS bucket instead of output_dir"),
) -> None:
    """Run the full pipeline and write the updated guide."""
    setup_logging(settings.log_level)
    console.print(f"[bold blue]Processing:[/bold blue] {pdf_path}")

    guide = Guide.model_validate(json.loads(guide_path.read_text(encoding="utf-8")))

    if bucket or settings.storage_bucket:
        storage = GCSImageStorage(bucket)
    else:
        storage = LocalImageStorage(output_dir)

    result = ImagePipeline(storage).process(pdf_path.read_bytes(), guide, venue_id)

    data = guide.model_dump()
    for area in data["areas"]:
        if area.get("images") is None:
            area.pop("images", None)

    output_path = output_dir / guide_path.name
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(json.dumps(data, indent=2), encoding="utf-8")

    console.print(
        f"Extracted {result.images_extracted}, uploaded {result.images_uploaded}, "
        f"sections with images {result.sections_with_images}"
    )
    for warning in result.warnings:
        console.print(f"[yellow]{warning}[/yellow]")
    console.print(f"[dim]Guide written to {output_path}[/dim]")


if __name__ == "__main__":
    app()
