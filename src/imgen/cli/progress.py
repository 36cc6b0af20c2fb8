"""
Rich progress displays for CLI operations.

All output goes to stderr to preserve stdout for machine-readable output
(saved paths, or the image bytes themselves with ``--out -``).
"""

from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn, TimeElapsedColumn
from rich.table import Table

from imgen.core.api import ImagesResponse

# Console for stderr output (preserves stdout for machine output)
console = Console(stderr=True)


@contextmanager
def request_progress(
    action: str,
    model: str | None = None,
    n: int = 1,
    source_images: int = 0,
    masked: bool = False,
) -> Iterator[None]:
    """
    Display a spinner while waiting for the API response.

    Args:
        action: Verb for the description, e.g. "Creating" or "Editing"
        model: The image model being used
        n: Number of images requested
        source_images: Number of source images sent (edit only)
        masked: Whether a mask was sent (edit only)

    Yields:
        None while the request is in progress
    """
    progress = Progress(
        SpinnerColumn(spinner_name="dots"),
        TextColumn("[blue]{task.description}"),
        TimeElapsedColumn(),
        console=console,
        transient=True,  # Disappears when done
    )

    desc_parts = [f"{action} {n} image{'s' if n != 1 else ''}"]
    if model:
        model_display = model if len(model) <= 40 else f"{model[:37]}..."
        desc_parts.append(f"[dim]({escape(model_display)})[/dim]")

    features = []
    if source_images:
        features.append(
            f"[dim cyan]{source_images} source image{'s' if source_images != 1 else ''}[/dim cyan]"
        )
    if masked:
        features.append("[dim cyan]mask[/dim cyan]")
    if features:
        desc_parts.append("• " + " + ".join(features))

    with progress:
        task = progress.add_task(" ".join(desc_parts), total=None)
        yield
        progress.update(task, completed=True)


def print_success_result(
    response: ImagesResponse,
    output_paths: list[Path],
    elapsed: float,
    model_used: str,
    prompt_used: str,
) -> None:
    """
    Print a rich formatted success message with generation details.

    Args:
        response: The decoded API response
        output_paths: Files written; empty when the image went to stdout
        elapsed: Request time in seconds
        model_used: The model that generated the images
        prompt_used: The prompt that was sent
    """
    table = Table.grid(padding=(0, 2))
    table.add_column(style="cyan", justify="right", vertical="top")
    table.add_column(style="white")

    if output_paths:
        saved = "\n".join(f"[bold green]{escape(str(p))}[/bold green]" for p in output_paths)
    else:
        saved = "[bold green]<stdout>[/bold green]"
    table.add_row("Saved to", saved)

    sizes = sorted({f"{img.width}x{img.height}" for img in response.images})
    table.add_row("Images", f"{len(response.images)} ({', '.join(sizes)})")
    table.add_row("Model", escape(model_used))
    table.add_row("Time", f"{elapsed:.1f}s")

    if response.usage is not None:
        usage = response.usage
        table.add_row(
            "Tokens",
            f"{usage.input_tokens} in ({usage.text_tokens} text, {usage.image_tokens} image) "
            f"• {usage.output_tokens} out",
        )
        table.add_row("Cost", f"${usage.calculate_cost():.4f} (estimated)")

    table.add_row("Prompt", f"[dim]{escape(prompt_used)}[/dim]")

    title = "Image Generated" if len(response.images) == 1 else "Images Generated"
    panel = Panel(
        table,
        title=f"[bold green]✓ {title}[/bold green]",
        border_style="green",
        padding=(1, 2),
    )

    console.print()
    console.print(panel)


def print_info(message: str) -> None:
    """Print an info message in cyan."""
    console.print(f"[cyan]ℹ[/cyan] {escape(message)}")


def print_warning(message: str) -> None:
    """Print a warning message in yellow."""
    console.print(f"[yellow]⚠[/yellow] {escape(message)}")


def print_error(message: str) -> None:
    """Print an error message in red."""
    console.print(f"[red]✗[/red] {escape(message)}")


def print_success(message: str) -> None:
    """Print a success message in green."""
    console.print(f"[green]✓[/green] {escape(message)}")
