from __future__ import annotations
from typing import NoReturn, Optional
import typer
from rich import print
from rich.markup import escape
from .config_loader import load_config
from .detector import Detector
from .errors import ConfigError, GibberishError
from .model.bigrams import train
from .model.schema import is_valid_model
from .model.store import (
    DEFAULT_BAD_PATH,
    DEFAULT_CORPUS_PATH,
    DEFAULT_GOOD_PATH,
    load_default_model,
    read_text,
    save_model,
)
from .utils.logging import setup_logging

app = typer.Typer(no_args_is_help=True)
logger = setup_logging(__name__)


@app.callback()
def main(
    log_level: str = typer.Option(None, "--log-level", help="DEBUG | INFO | WARNING | ERROR"),
):
    """Bigram gibberish detection: score, detect, train and scan."""
    if log_level:
        try:
            setup_logging(__name__, level=log_level)
        except ConfigError as e:
            _fail(e)


def _detector(config: Optional[str], model: Optional[str]) -> Detector:
    logger.debug("Building detector (config=%s, model=%s)", config, model)
    return Detector.from_config(load_config(config), model_path=model)


def _fail(e: Exception) -> NoReturn:
    print(f"[red]{type(e).__name__}: {escape(str(e))}[/red]")
    raise SystemExit(1)


@app.command()
def health():
    """Load the bundled model and report its size, threshold and calibration."""
    try:
        model = load_default_model()
        detector = Detector()
    except GibberishError as e:
        _fail(e)
    b = model.baseline
    print(f"[green]Model: ok[/green] — {len(model.table)} pairs")
    print(f"  good: min={b.good.min:.3f} max={b.good.max:.3f} avg={b.good.avg:.3f}")
    print(f"  bad:  min={b.bad.min:.3f} max={b.bad.max:.3f} avg={b.bad.avg:.3f}")
    print(f"  threshold: {detector.threshold():.3f}")
    if model.well_calibrated:
        print("[green]Calibration: ok[/green]")
    else:
        print("[yellow]Calibration: good.min <= bad.max[/yellow] — retrain with better samples")


@app.command("detect")
def detect_cmd(
    text: str = typer.Argument(...),
    config: str = typer.Option(None, "--config", "-c"),
    model: str = typer.Option(None, "--model", "-m"),
):
    """Classify TEXT. Exit code 2 when it is gibberish."""
    try:
        d = _detector(config, model)
        score = d.score(text)
        gib = d.detect(text)
        threshold = d.threshold()
    except (GibberishError, OSError) as e:
        _fail(e)
    shown = "n/a" if score is None else f"{score:.3f}"
    if gib:
        print(f"[red]gibberish[/red] (score {shown} <= threshold {threshold:.3f})")
        raise SystemExit(2)
    print(f"[green]ok[/green] (score {shown} > threshold {threshold:.3f})")


@app.command("score")
def score_cmd(
    text: str = typer.Argument(...),
    config: str = typer.Option(None, "--config", "-c"),
    model: str = typer.Option(None, "--model", "-m"),
):
    """Print the average bigram score of TEXT."""
    try:
        score = _detector(config, model).score(text)
    except (GibberishError, OSError) as e:
        _fail(e)
    print("n/a" if score is None else f"{score:.6f}")


@app.command("train")
def train_cmd(
    output: str = typer.Option(..., "--output", "-o"),
    corpus: str = typer.Option(DEFAULT_CORPUS_PATH, "--corpus"),
    good: str = typer.Option(DEFAULT_GOOD_PATH, "--good"),
    bad: str = typer.Option(DEFAULT_BAD_PATH, "--bad"),
):
    """Train a model from a corpus and newline-delimited good/bad sample files."""
    try:
        model = train(read_text(corpus), read_text(good), read_text(bad))
    except (GibberishError, OSError) as e:
        _fail(e)
    path = save_model(model, output)
    b = model.baseline
    print(f"[green]Saved model:[/green] {path} ({len(model.table)} pairs)")
    print(f"  good: min={b.good.min:.3f} max={b.good.max:.3f} avg={b.good.avg:.3f}")
    print(f"  bad:  min={b.bad.min:.3f} max={b.bad.max:.3f} avg={b.bad.avg:.3f}")
    if not model.well_calibrated:
        print("[yellow]Warning: good.min <= bad.max; the threshold will be unreliable.[/yellow]")


@app.command("validate")
def validate_cmd(model_path: str = typer.Argument(...)):
    """Check that MODEL_PATH holds a well-formed {matrix, baseline} model."""
    import json
    try:
        with open(model_path, "r", encoding="utf-8") as f:
            payload = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        _fail(e)
    if not is_valid_model(payload):
        print(f"[red]Invalid model:[/red] {model_path}")
        raise SystemExit(1)
    print(f"[green]Valid model:[/green] {model_path}")


@app.command("scan")
def scan_cmd(
    input_file: str = typer.Option(..., "--input", "-i"),
    output_file: str = typer.Option(..., "--output", "-o"),
    column: str = typer.Option(None, "--column"),
    config: str = typer.Option(None, "--config", "-c"),
    model: str = typer.Option(None, "--model", "-m"),
):
    """Add gibberish_score / is_gibberish columns to a CSV or Excel file."""
    from .scan import run_scan
    try:
        cfg = load_config(config)
        settings = cfg.scan if not column else cfg.scan.model_copy(update={"text_column": column})
        d = Detector.from_config(cfg, model_path=model)
        out, rows, flagged = run_scan(d, input_file, output_file, settings)
    except (GibberishError, OSError) as e:
        _fail(e)
    print(f"[cyan]Scanned {rows} rows[/cyan] — [red]{flagged} gibberish[/red]")
    print(f"[green]Saved:[/green] {out}")
