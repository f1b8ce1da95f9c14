"""Command-line interface for Redmine Markup."""

import logging
from collections import Counter
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn

from redmine_markup import __version__
from redmine_markup.config import get_settings
from redmine_markup.core.converter import ConversionError, MarkupConverter
from redmine_markup.formats import SUPPORTED_EXTENSIONS
from redmine_markup.formatting.errors import MarkupError
from redmine_markup.formatting.markup import MAX_DEPTH_LIMIT
from redmine_markup.sinks import (
    ClipboardSink,
    FileSink,
    OutputSink,
    SinkError,
    StdoutSink,
)

OUTPUT_EXTENSION = ".textile"

app = typer.Typer(
    name="redmine-markup",
    help="Convert rich-text documents into Redmine wiki markup.",
    add_completion=False,
)
# Status goes to stderr so --stdout output stays clean
console = Console(stderr=True)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"Redmine Markup v{__version__}")
        raise typer.Exit()


def generate_output_path(
    input_path: Path,
    output_dir: Optional[Path] = None,
    suffix: Optional[str] = None,
    keep_extension: bool = False,
) -> Path:
    """Generate output path with the configured suffix and .textile extension.

    With keep_extension the source extension stays in the name
    (notes.html-redmine.textile) so same-stem inputs get distinct outputs.
    """
    if suffix is None:
        suffix = get_settings().output_suffix
    base = input_path.name if keep_extension else input_path.stem
    output_name = f"{base}{suffix}{OUTPUT_EXTENSION}"

    if output_dir:
        return output_dir / output_name
    return input_path.parent / output_name


def plan_output_paths(
    files: list[Path],
    folder_path: Path,
    output_dir: Optional[Path] = None,
) -> dict[Path, Path]:
    """Map each input file to a unique output path.

    Subfolders are mirrored under output_dir. Inputs that would share an
    output (notes.txt and notes.html) keep their extension in the name.
    """
    targets: dict[Path, Path] = {}
    for file_path in files:
        target_dir = None
        if output_dir:
            target_dir = output_dir / file_path.parent.relative_to(folder_path)
        targets[file_path] = generate_output_path(file_path, target_dir)

    counts = Counter(targets.values())
    for file_path, target in targets.items():
        if counts[target] > 1:
            targets[file_path] = generate_output_path(
                file_path, target.parent, keep_extension=True
            )
    return targets


def process_file(
    input_path: Path,
    sink: OutputSink,
    converter: MarkupConverter,
    verbose: bool,
) -> bool:
    """Convert a single file into a sink. Returns True on success."""
    if not input_path.exists():
        console.print(f"[red]Error:[/red] File not found: {input_path}")
        return False

    ext = input_path.suffix.lower()
    if ext not in SUPPORTED_EXTENSIONS:
        console.print(
            f"[yellow]Skipping:[/yellow] {input_path.name} "
            f"(unsupported format: {ext})"
        )
        return False

    if verbose:
        console.print(f"[blue]Processing:[/blue] {input_path}")
        console.print(f"[blue]Output:[/blue] {_describe(sink)}")

    try:
        converter.convert_file_to(input_path, sink)
    except (ConversionError, MarkupError, SinkError) as e:
        console.print(f"[red]Error processing {input_path.name}:[/red] {e}")
        if verbose:
            console.print_exception()
        return False

    console.print(f"[green]Success:[/green] {_describe(sink)}")
    return True


def process_folder(
    folder_path: Path,
    converter: MarkupConverter,
    verbose: bool,
    output_dir: Optional[Path] = None,
    recursive: bool = True,
) -> tuple[int, int]:
    """Convert all supported files in a folder. Returns (success_count, fail_count)."""
    if not folder_path.is_dir():
        console.print(f"[red]Error:[/red] Not a directory: {folder_path}")
        return 0, 0

    files: list[Path] = []
    for ext in SUPPORTED_EXTENSIONS:
        if recursive:
            files.extend(folder_path.rglob(f"*{ext}"))
        else:
            files.extend(folder_path.glob(f"*{ext}"))

    # Skip earlier outputs that were renamed to a supported extension
    suffix = get_settings().output_suffix
    files = sorted(f for f in files if not f.stem.endswith(suffix))

    if not files:
        console.print(
            f"[yellow]No supported files found in {folder_path}[/yellow]\n"
            f"Supported formats: {', '.join(SUPPORTED_EXTENSIONS)}"
        )
        return 0, 0

    console.print(f"[blue]Found {len(files)} file(s) to convert[/blue]")

    targets = plan_output_paths(files, folder_path, output_dir)
    success_count = 0
    fail_count = 0

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
    ) as progress:
        task = progress.add_task("Converting files...", total=len(files))

        for file_path in files:
            progress.update(task, description=f"Converting {file_path.name}...")
            target = targets[file_path]
            target.parent.mkdir(parents=True, exist_ok=True)
            sink = FileSink(target)
            if process_file(file_path, sink, converter, verbose):
                success_count += 1
            else:
                fail_count += 1
            progress.advance(task)

    return success_count, fail_count


def _describe(sink: OutputSink) -> str:
    if isinstance(sink, FileSink):
        return str(sink.path)
    if isinstance(sink, ClipboardSink):
        return "clipboard"
    return "stdout"


@app.command()
def main(
    path: Path = typer.Argument(
        ...,
        help="File or folder to convert",
        exists=True,
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output file (single file) or output directory (folder mode)",
    ),
    to_stdout: bool = typer.Option(
        False,
        "--stdout",
        "-s",
        help="Print the markup instead of writing a file",
    ),
    to_clipboard: bool = typer.Option(
        False,
        "--clipboard",
        "-c",
        help="Copy the markup to the system clipboard instead of writing a file",
    ),
    max_depth: Optional[int] = typer.Option(
        None,
        "--max-depth",
        "-d",
        min=1,
        max=MAX_DEPTH_LIMIT,
        help=(
            "Deepest frame/table nesting accepted "
            f"(default: 200, at most {MAX_DEPTH_LIMIT})"
        ),
    ),
    code_font: Optional[List[str]] = typer.Option(
        None,
        "--code-font",
        "-f",
        help="Font family rendered as @code@ (repeatable; default: Courier, Courier New)",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose output",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """
    Convert documents into Redmine wiki markup.

    Examples:

        redmine-markup notes.docx  # Writes notes-redmine.textile

        redmine-markup page.html --clipboard

        redmine-markup report.odt --stdout

        redmine-markup /path/to/folder -o /path/to/out
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )

    destinations = sum([output is not None and path.is_file(), to_stdout, to_clipboard])
    if destinations > 1:
        console.print(
            "[red]Error:[/red] Choose only one of --output, --stdout and --clipboard"
        )
        raise typer.Exit(2)

    converter = MarkupConverter(code_fonts=code_font or None, max_depth=max_depth)

    if path.is_file():
        # Single file mode
        sink: OutputSink
        if to_stdout:
            sink = StdoutSink()
        elif to_clipboard:
            sink = ClipboardSink()
        else:
            sink = FileSink(output or generate_output_path(path))

        success = process_file(path, sink, converter, verbose)
        raise typer.Exit(0 if success else 1)
    else:
        # Folder mode
        if to_stdout or to_clipboard:
            console.print(
                "[red]Error:[/red] --stdout and --clipboard need a single file"
            )
            raise typer.Exit(2)

        if output is not None:
            output.mkdir(parents=True, exist_ok=True)

        success, fail = process_folder(path, converter, verbose, output_dir=output)
        console.print(
            f"\n[bold]Complete:[/bold] {success} succeeded, {fail} failed"
        )
        raise typer.Exit(0 if fail == 0 else 1)


if __name__ == "__main__":
    app()
