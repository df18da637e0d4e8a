"""Command-line interface for bananaslide."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any, Optional

import typer
from dotenv import load_dotenv
from rich import box
from rich.console import Console
from rich.table import Table

from .constants import STATUS_ICONS, SlideStatus, VARIANT_DEFAULT_COUNT
from .errors import ProviderError
from .generation.dimensions import dalle_size, resolve_size, stability_size
from .generation.models import (
    AspectRatio,
    GenerationSettings,
    ImageSize,
    ModelType,
    ProviderId,
    SlideJob,
    VolcengineModel,
)
from .generation.service import SlideGenerationService
from .images import encode_image_file, image_dimensions, save_image
from .providers.config import ProviderCredentials, load_generation_config
from .providers.factory import REQUIRED_CREDENTIAL, available_providers, normalize_provider

app = typer.Typer(
    name="bananaslide",
    help="AI slide background generator with interchangeable image providers",
    add_completion=False,
)

console = Console()

DEFAULT_LOG_DIR = Path(__file__).parent.parent.parent / "logs"


def setup_logging(log_dir: Path = DEFAULT_LOG_DIR) -> None:
    """Send provider call logs to a file and keep the console clean."""
    for logger_name in ["httpx", "httpcore"]:
        logger = logging.getLogger(logger_name)
        logger.setLevel(logging.WARNING)
        logger.propagate = False

    log_dir.mkdir(parents=True, exist_ok=True)
    formatter = logging.Formatter("%(asctime)s | %(levelname)s | %(message)s")
    file_handler = logging.FileHandler(log_dir / "ai_calls.log", encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(formatter)

    for logger_name in ["ai_calls", "bananaslide.batch"]:
        logger = logging.getLogger(logger_name)
        logger.setLevel(logging.DEBUG)
        logger.propagate = False
        logger.handlers = [file_handler]


@app.callback()
def main(
    log_dir: Path = typer.Option(DEFAULT_LOG_DIR, "--log-dir", help="Directory for log files"),
) -> None:
    """Load .env and configure logging."""
    load_dotenv()
    setup_logging(log_dir)


def _parse_ratio_option(aspect_ratio: str) -> tuple[AspectRatio | str, str | None]:
    """Named ratios map to the enum; anything else is a custom "W:H"."""
    try:
        named = AspectRatio(aspect_ratio)
    except ValueError:
        return AspectRatio.CUSTOM, aspect_ratio
    return named, None


@app.command()
def generate(
    slides: list[str] = typer.Option([], "--slide", "-s", help="Slide text (repeatable)"),
    slide_images: list[Path] = typer.Option(
        [], "--slide-image", help="Content image per slide (repeatable)"
    ),
    provider: Optional[str] = typer.Option(
        None, "--provider", "-p", help="gemini, volcengine, dalle, stability (default from config)"
    ),
    style: str = typer.Option("", "--style", help="Visual style description"),
    colors: str = typer.Option("", "--colors", help="Color scheme"),
    requirements: str = typer.Option("", "--requirements", help="Extra design requirements"),
    aspect_ratio: str = typer.Option("16:9", "--ratio", "-r", help="Named ratio or custom W:H"),
    size: ImageSize = typer.Option(ImageSize.K2, "--size", help="Quality tier"),
    model: ModelType = typer.Option(ModelType.PRO, "--model", help="Gemini model"),
    volcengine_model: VolcengineModel = typer.Option(
        VolcengineModel.SEEDREAM_4_5, "--volcengine-model", help="Seedream model"
    ),
    variants: int = typer.Option(VARIANT_DEFAULT_COUNT, "--variants", "-n", min=1, help="Variants per slide"),
    reference: Optional[Path] = typer.Option(None, "--reference", help="Style reference image"),
    output: Path = typer.Option(Path("output"), "--output", "-o", help="Output directory"),
    config_path: Optional[Path] = typer.Option(None, "--config", help="generation.yaml path"),
    stop_on_auth_error: bool = typer.Option(
        False, "--stop-on-auth-error", help="Stop the batch when credentials are rejected"
    ),
) -> None:
    """Generate slide backgrounds and save them as slide-N-vM.png."""
    if not slides and not slide_images:
        console.print("[red]Error: provide at least one --slide or --slide-image[/red]")
        raise typer.Exit(1)

    config = load_generation_config(config_path)
    ratio, custom_ratio = _parse_ratio_option(aspect_ratio)
    settings = GenerationSettings(
        style_description=style,
        color_scheme=colors,
        design_requirements=requirements,
        reference_image=encode_image_file(reference) if reference else None,
        aspect_ratio=ratio,
        custom_aspect_ratio=custom_ratio,
        image_size=size,
        model=model,
        volcengine_model=volcengine_model,
        provider=normalize_provider(provider, config.default_provider),
    )

    jobs: list[SlideJob] = []
    for index in range(max(len(slides), len(slide_images))):
        jobs.append(SlideJob(
            id=f"slide-{index + 1}",
            slide_content=slides[index] if index < len(slides) else "",
            slide_image=(
                encode_image_file(slide_images[index]) if index < len(slide_images) else None
            ),
            variant_count=variants,
        ))

    service = SlideGenerationService(
        settings,
        ProviderCredentials(),
        config,
    )

    async def _on_update(job_id: str, updates: dict[str, Any]) -> None:
        job = next(j for j in jobs if j.id == job_id)
        job.apply(updates)
        status = updates.get("status")
        if status == SlideStatus.GENERATING:
            console.print(f"  [cyan]{STATUS_ICONS[status]}[/cyan] {job_id}: generating...")
        elif status == SlideStatus.SUCCESS:
            console.print(f"  [green]{STATUS_ICONS[status]}[/green] {job_id}: done")
        elif status == SlideStatus.ERROR:
            console.print(f"  [red]{STATUS_ICONS[status]}[/red] {job_id}: {updates.get('error_message')}")

    console.print(
        f"[bold]Generating {len(jobs)} slide(s) with {settings.provider.value}[/bold] "
        f"({settings.ratio_label}, {size.value}, {variants} variant(s) each)"
    )
    summary = asyncio.run(
        service.run(jobs, on_update=_on_update, stop_on_unauthenticated=stop_on_auth_error)
    )

    table = Table(title="Results", box=box.SIMPLE)
    table.add_column("Slide")
    table.add_column("Status")
    table.add_column("Files / Error")

    for slide_number, job in enumerate(jobs, 1):
        if job.status == SlideStatus.SUCCESS:
            files = []
            for variant_number, image in enumerate(job.generated_images, 1):
                path = save_image(image, output / f"slide-{slide_number}-v{variant_number}.png")
                width, height = image_dimensions(image)
                files.append(f"{path.name} ({width}x{height})")
            table.add_row(job.id, "[green]success[/green]", "\n".join(files))
        else:
            table.add_row(job.id, f"[red]{job.status.value}[/red]", job.error_message or "skipped")

    console.print(table)

    if summary.halted:
        console.print("[yellow]Batch stopped: check the API key configuration[/yellow]")
    if summary.failed or summary.skipped:
        raise typer.Exit(1)


@app.command()
def sizes(
    aspect_ratio: str = typer.Option("16:9", "--ratio", "-r", help="Named ratio or custom W:H"),
    size: ImageSize = typer.Option(ImageSize.K2, "--size", help="Quality tier"),
) -> None:
    """Show the request size each provider would use."""
    ratio, custom_ratio = _parse_ratio_option(aspect_ratio)

    seedream = resolve_size(size, ratio, custom_ratio)
    table = Table(title=f"Sizes for {aspect_ratio} @ {size.value}", box=box.SIMPLE)
    table.add_column("Provider")
    table.add_column("Size")
    table.add_column("Pixels", justify="right")

    gemini_ratio = custom_ratio or ratio.value
    table.add_row("gemini", f"aspectRatio={gemini_ratio}", "-")
    table.add_row("volcengine", str(seedream), f"{seedream.pixels:,}")
    dalle = dalle_size(ratio, custom_ratio)
    table.add_row("dalle", dalle, "-")
    stability = stability_size(ratio, custom_ratio)
    table.add_row("stability", str(stability), f"{stability.pixels:,}")

    console.print(table)


@app.command()
def providers() -> None:
    """Show which providers have credentials configured."""
    credentials = ProviderCredentials()
    ready = set(available_providers(credentials))

    table = Table(title="Providers", box=box.SIMPLE)
    table.add_column("Provider")
    table.add_column("Credential")
    table.add_column("Status")

    for provider in ProviderId:
        field_name = REQUIRED_CREDENTIAL[provider]
        status = "[green]ready[/green]" if provider in ready else "[red]missing key[/red]"
        table.add_row(provider.value, field_name.upper(), status)

    console.print(table)


def run() -> None:
    """Console script entry point."""
    try:
        app()
    except ProviderError as e:
        console.print(f"[red]Error: {e.message}[/red]")
        raise SystemExit(1) from e


if __name__ == "__main__":
    run()
