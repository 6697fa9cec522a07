from __future__ import annotations

import signal
import sys
import threading
from functools import partial
from pathlib import Path
from typing import Optional

import typer

from segboost.boosting import AdaBoostTrainer
from segboost.config import get_settings
from segboost.evaluation import (
    evaluate_segmentation,
    format_metrics_text,
    format_results_json,
    format_segmentation_text,
)
from segboost.exceptions import SegBoostError
from segboost.io import (
    iter_file_lines,
    iter_segmented,
    load_model,
    read_lines,
    save_model,
    segment_file,
    write_feature_file,
    write_lines,
)
from segboost.logging_utils import configure_logging
from segboost.model import Model
from segboost.segmenter import Segmenter

app = typer.Typer(add_completion=False, no_args_is_help=True, help="SegBoost word segmenter CLI")


@app.callback()
def _init(
    verbose: bool = typer.Option(False, "-v", help="Verbose logging (overrides env)"),
) -> None:
    # Env controls defaults; -v forces DEBUG.
    configure_logging(override_level="DEBUG" if verbose else None)


def _fail(e: Exception) -> None:
    typer.echo(f"Error: {e}", err=True)
    raise typer.Exit(code=1)


def _make_interrupt_handler(cancel_event: threading.Event):
    """First Ctrl-C stops training after the current iteration; the second one aborts."""

    def handler(signum, frame):
        if cancel_event.is_set():
            signal.signal(signal.SIGINT, signal.default_int_handler)
            raise KeyboardInterrupt
        typer.echo("\nStopping after the current iteration (press Ctrl-C again to abort)", err=True)
        cancel_event.set()

    return handler


def _install_interrupt_handler(cancel_event: threading.Event):
    """Install the cancelling SIGINT handler; returns the previous one, or None off the main thread."""
    try:
        return signal.signal(signal.SIGINT, _make_interrupt_handler(cancel_event))
    except ValueError:
        # Not in the main thread (e.g. embedded runners); cancellation stays manual.
        return None


@app.command()
def extract(
    corpus_file: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True, help="Gold corpus, words separated by spaces"),
    features_file: Path = typer.Argument(..., help="Output feature file"),
) -> None:
    """Extract training instances from a segmented corpus."""
    try:
        count = write_feature_file(Segmenter(), read_lines(corpus_file), features_file)
    except SegBoostError as e:
        _fail(e)
    typer.echo(f"Feature extraction completed: {count} instances written to {features_file}")


@app.command()
def train(
    features_file: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True, help="Feature file produced by 'extract'"),
    model_file: Path = typer.Argument(..., help="Output model file"),
    threshold: Optional[float] = typer.Option(None, "--threshold", "-t", help="Stop when the best margin falls below this"),
    num_iterations: Optional[int] = typer.Option(None, "--num-iterations", "-n", help="Maximum boosting rounds"),
    num_workers: Optional[int] = typer.Option(None, "--num-workers", "-m", help="Threads for the accumulation pass"),
    load_model_file: Optional[Path] = typer.Option(None, "--load-model", "-M", exists=True, dir_okay=False, help="Resume from an existing model"),
) -> None:
    """Train a boundary model with AdaBoost and print its training metrics."""
    settings = get_settings()
    try:
        model = load_model(load_model_file) if load_model_file else Model()
        trainer = AdaBoostTrainer(
            threshold=settings.threshold if threshold is None else threshold,
            num_iterations=settings.num_iterations if num_iterations is None else num_iterations,
            num_workers=settings.num_workers if num_workers is None else num_workers,
            model=model,
        )
        trainer.load_feature_lines(partial(iter_file_lines, features_file), source=str(features_file))

        cancel_event = threading.Event()
        previous = _install_interrupt_handler(cancel_event)
        try:
            result = trainer.train(cancel_event)
        finally:
            if previous is not None:
                signal.signal(signal.SIGINT, previous)

        save_model(trainer.model, model_file)
    except SegBoostError as e:
        _fail(e)

    typer.echo(f"Training stopped ({result.stop_reason.value}) after {result.iterations} iterations")
    typer.echo(format_metrics_text(trainer.metrics()))
    typer.echo(f"Model saved to {model_file}")


@app.command()
def segment(
    model_file: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True, help="Trained model file"),
    input_file: Optional[Path] = typer.Argument(None, exists=True, dir_okay=False, readable=True, help="Text to segment (default: stdin)"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Output file (default: stdout)"),
) -> None:
    """Segment text into words, one output line per input line."""
    try:
        segmenter = Segmenter(load_model(model_file))
        if input_file is not None and output is not None:
            segment_file(segmenter, input_file, output)
            return
        lines = read_lines(input_file) if input_file is not None else (line.rstrip("\n") for line in sys.stdin)
        if output is not None:
            write_lines(iter_segmented(segmenter, lines), output)
        else:
            for segmented in iter_segmented(segmenter, lines):
                typer.echo(segmented)
    except SegBoostError as e:
        _fail(e)


@app.command()
def evaluate(
    model_file: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True, help="Trained model file"),
    corpus_file: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True, help="Gold corpus, words separated by spaces"),
    format: str = typer.Option("text", help="Output format: text or json"),
) -> None:
    """Evaluate segmentation quality against a gold corpus.

    Example:
        segboost evaluate model.txt gold.txt --format json
    """
    try:
        segmenter = Segmenter(load_model(model_file))
        metrics = evaluate_segmentation(segmenter, read_lines(corpus_file))
    except SegBoostError as e:
        _fail(e)

    if format == "json":
        typer.echo(format_results_json(metrics))
    else:
        typer.echo(format_segmentation_text(metrics))


def main() -> None:  # pragma: no cover - console entry point
    app()


if __name__ == "__main__":  # pragma: no cover
    main()
