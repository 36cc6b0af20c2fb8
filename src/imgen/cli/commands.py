"""
Click command definitions for the imgen CLI.

This module contains the Click command group and all CLI commands
(create, edit, setup).
"""

import time
from collections.abc import Callable
from pathlib import Path

import click

from imgen import (
    Config,
    CreateRequest,
    EditRequest,
    ImagesClient,
    ImagesResponse,
    Inputs,
    OutputTarget,
    PromptInput,
    StoredConfig,
    __version__,
    save_images,
    validate_prompt,
)
from imgen.cli import progress
from imgen.cli.handlers import run_with_error_handling
from imgen.cli.utils import IMAGE, PROMPT
from imgen.core.api import (
    BACKGROUNDS,
    MAX_IMAGES,
    MODERATIONS,
    OUTPUT_FORMATS,
    QUALITIES,
    SIZES,
)
from imgen.core.inputs import STDOUT, ImageInput
from imgen.logging_config import configure_logging, get_verbosity_from_env, resolve_verbosity

INPUT_HELP = """
\b
PROMPT may be literal text, a path to a text file, '@path' to require a
file, or '-' to read from stdin. An existing file always takes precedence
over literal text.
"""


@click.group(
    help=f"""Create and edit images with the OpenAI Images API (gpt-image-1).

\b
Version: {__version__}
"""
)
@click.version_option(version=__version__, package_name="imgen")
def cli() -> None:
    pass


def _common_options(fn: Callable) -> Callable:
    """Options shared by create and edit."""
    options = [
        click.option(
            "--out",
            "-o",
            help="Output file, or '-' for stdout. Only valid with -n 1. "
            "Default: <prompt>.<timestamp>.<index>.<ext> in the current directory.",
        ),
        click.option("--open", "open_files", is_flag=True, help="Open saved images when done."),
        click.option("--model", help="Image model ID (default from config: gpt-image-1)."),
        click.option(
            "--api-key",
            envvar="OPENAI_API_KEY",
            help="OpenAI API key (overrides OPENAI_API_KEY and the stored config).",
        ),
        click.option(
            "--quiet",
            "-q",
            is_flag=True,
            help="Minimize progress messages; only print result paths or errors.",
        ),
        click.option(
            "--verbose",
            "-v",
            "verbose_count",
            count=True,
            help="Increase verbosity: -v also show prompts, -vv show request detail.",
        ),
        click.option(
            "--debug-api",
            is_flag=True,
            help="Log raw API request and response (image data truncated) for debugging.",
        ),
    ]
    for option in reversed(options):
        fn = option(fn)
    return fn


def _setup_logging(quiet: bool, verbose_count: int) -> None:
    configure_logging(verbose_level=resolve_verbosity(verbose_count), quiet=quiet)


def _load_config(api_key: str | None, debug_api: bool) -> Config:
    config = Config.from_env()
    if api_key is not None:
        config.set_api_key(api_key)
    if debug_api:
        config.debug_api = True
    config.validate()
    return config


def _send(
    request_fn: Callable[[], ImagesResponse],
    *,
    quiet: bool,
    action: str,
    model: str,
    n: int,
    source_images: int = 0,
    masked: bool = False,
) -> tuple[ImagesResponse, float]:
    start = time.time()
    if quiet:
        response = request_fn()
    else:
        with progress.request_progress(
            action, model=model, n=n, source_images=source_images, masked=masked
        ):
            response = request_fn()
    return response, time.time() - start


def _finish(
    response: ImagesResponse,
    prompt_text: str,
    target: OutputTarget,
    *,
    elapsed: float,
    model: str,
    quiet: bool,
    open_files: bool,
) -> None:
    """Save images, print the summary, and optionally open the files."""
    paths = save_images(
        response, prompt_text, target, stdout=click.get_binary_stream("stdout")
    )

    if not quiet:
        progress.print_success_result(
            response,
            output_paths=paths,
            elapsed=elapsed,
            model_used=model,
            prompt_used=prompt_text,
        )
    # Paths go to stdout for scriptability, unless stdout carries the image
    if target.kind != STDOUT:
        for path in paths:
            click.echo(str(path))

    if open_files:
        if not paths:
            if not quiet:
                progress.print_warning("Nothing to open: the image was written to stdout.")
        for path in paths:
            if not quiet:
                progress.print_info(f"Opening {path}")
            click.launch(str(path))


@cli.command(epilog=INPUT_HELP)
@click.argument("prompt", type=PROMPT)
@click.option(
    "-n",
    "n",
    type=click.IntRange(1, MAX_IMAGES),
    default=1,
    show_default=True,
    help="Number of images to generate.",
)
@click.option("--size", type=click.Choice(SIZES), default="1024x1024", show_default=True)
@click.option("--quality", type=click.Choice(QUALITIES), default="low", show_default=True)
@click.option(
    "--background",
    type=click.Choice(BACKGROUNDS),
    default="auto",
    show_default=True,
    help="Background transparency.",
)
@click.option(
    "--moderation",
    type=click.Choice(MODERATIONS),
    default="low",
    show_default=True,
    help="Content-moderation level.",
)
@click.option(
    "--output-compression",
    type=click.IntRange(0, 100),
    default=100,
    show_default=True,
    help="Compression level for jpeg and webp output.",
)
@click.option(
    "--output-format",
    type=click.Choice(OUTPUT_FORMATS),
    default="png",
    show_default=True,
)
@_common_options
def create(
    prompt: PromptInput,
    n: int,
    size: str,
    quality: str,
    background: str,
    moderation: str,
    output_compression: int,
    output_format: str,
    out: str | None,
    open_files: bool,
    model: str | None,
    api_key: str | None,
    quiet: bool,
    verbose_count: int,
    debug_api: bool,
) -> None:
    """Create images from a text prompt."""
    _setup_logging(quiet, verbose_count)

    def do_create() -> None:
        # 1. Pre-flight checks: nothing is read and no request is sent before these pass
        inputs = Inputs.create(prompt)
        target = OutputTarget.parse(out)
        target.validate(n)

        # 2. Config
        config = _load_config(api_key, debug_api)
        model_eff = model or config.image_model

        # 3. Read and validate the prompt
        prompt_text = inputs.read_prompt()
        validate_prompt(prompt_text)

        # 4. Request
        request = CreateRequest(
            prompt=prompt_text,
            model=model_eff,
            n=n,
            size=size,
            quality=quality,
            background=background,
            moderation=moderation,
            output_compression=output_compression,
            output_format=output_format,
        )
        client = ImagesClient(config)
        response, elapsed = _send(
            lambda: client.create_images(request),
            quiet=quiet,
            action="Creating",
            model=model_eff,
            n=n,
        )

        # 5. Save and report
        _finish(
            response,
            prompt_text,
            target,
            elapsed=elapsed,
            model=model_eff,
            quiet=quiet,
            open_files=open_files,
        )

    run_with_error_handling(do_create, quiet=quiet)


@cli.command(epilog=INPUT_HELP + "\nIMAGE and MASK may be a file path, '@path', or '-' for stdin.")
@click.argument("prompt", type=PROMPT)
@click.option(
    "--image",
    "-i",
    "images",
    type=IMAGE,
    multiple=True,
    required=True,
    help="Source image to edit (repeatable).",
)
@click.option(
    "--mask",
    "-m",
    type=IMAGE,
    help="Image whose transparent areas mark where to edit.",
)
@click.option(
    "-n",
    "n",
    type=click.IntRange(1, MAX_IMAGES),
    default=1,
    show_default=True,
    help="Number of images to generate.",
)
@click.option("--quality", type=click.Choice(QUALITIES), default="low", show_default=True)
@click.option("--size", type=click.Choice(SIZES), default="1024x1024", show_default=True)
@_common_options
def edit(
    prompt: PromptInput,
    images: tuple[ImageInput, ...],
    mask: ImageInput | None,
    n: int,
    quality: str,
    size: str,
    out: str | None,
    open_files: bool,
    model: str | None,
    api_key: str | None,
    quiet: bool,
    verbose_count: int,
    debug_api: bool,
) -> None:
    """Create edited or extended images from one or more source images and a prompt."""
    _setup_logging(quiet, verbose_count)

    def do_edit() -> None:
        # 1. Pre-flight checks: stdin used at most once, explicit output only for one image
        inputs = Inputs.create(prompt, images, mask)
        target = OutputTarget.parse(out)
        target.validate(n)

        # 2. Config
        config = _load_config(api_key, debug_api)
        model_eff = model or config.image_model

        # 3. Read inputs
        prompt_text = inputs.read_prompt()
        validate_prompt(prompt_text)
        image_data = inputs.read_images()
        mask_data = inputs.read_mask()

        # 4. Request
        request = EditRequest(
            prompt=prompt_text,
            images=image_data,
            mask=mask_data,
            model=model_eff,
            n=n,
            quality=quality,
            size=size,
        )
        client = ImagesClient(config)
        response, elapsed = _send(
            lambda: client.edit_images(request),
            quiet=quiet,
            action="Editing",
            model=model_eff,
            n=n,
            source_images=len(image_data),
            masked=mask_data is not None,
        )

        # 5. Save and report
        _finish(
            response,
            prompt_text,
            target,
            elapsed=elapsed,
            model=model_eff,
            quiet=quiet,
            open_files=open_files,
        )

    run_with_error_handling(do_edit, quiet=quiet)


@cli.command()
@click.option(
    "--api-key",
    help="OpenAI API key to store. Prompted for (hidden) when omitted.",
)
def setup(api_key: str | None) -> None:
    """Store your OpenAI API key in the imgen config file."""
    configure_logging(verbose_level=get_verbosity_from_env(), quiet=False)

    def do_setup() -> None:
        key = api_key
        if key is None:
            key = click.prompt("OpenAI API key", hide_input=True, err=True)
        key = key.strip()
        # Reuse Config's key checks before writing anything
        Config().set_api_key(key)

        stored = StoredConfig.load()
        stored.openai_api_key = key
        path: Path = stored.save()
        progress.print_success(f"Saved API key to {path}")

    run_with_error_handling(do_setup)


def main() -> None:
    """Entry point for the imgen console script."""
    cli()


__all__ = ["cli", "main", "create", "edit", "setup"]
