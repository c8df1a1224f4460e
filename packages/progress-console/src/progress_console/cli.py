"""
CLI entry point.

``progress-console demo`` drives a simulated multi-threaded build through the
live progress console, or through plain line output when stdout is not a
terminal.
"""
from __future__ import annotations

import logging
import random
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Optional

import typer
from rich.console import Console

from .errors import ProgressProtocolError
from .events import (
    EndOutputEvent,
    LogEvent,
    OutputEvent,
    ProgressCompleteEvent,
    ProgressStartEvent,
)
from .factory import create_progress_renderer
from .formatting import ProgressBar
from .operations import ProgressOperations
from .progress_logger import ProgressLoggerFactory
from .settings import ConsoleSettings
from .style import Style

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="progress-console",
    help="Live terminal build progress",
    no_args_is_help=True,
)

_RICH_STYLES = {
    Style.HEADER: "bold",
    Style.SUCCESS: "green",
    Style.SUCCESS_HEADER: "bold green",
    Style.FAILURE: "red",
    Style.FAILURE_HEADER: "bold red",
    Style.ERROR: "red",
    Style.INFO: "yellow",
    Style.DESCRIPTION: "dim",
    Style.PROGRESS_STATUS: "dim",
}

_STEPS = ("compileJava", "processResources", "classes", "jar", "test")


class PlainOutputListener:
    """Line-per-event output for terminals without cursor control."""

    def __init__(self, console: Console) -> None:
        self._console = console
        self._operations = ProgressOperations()
        self._lock = threading.Lock()

    def on_output(self, event: OutputEvent) -> None:
        with self._lock:
            if isinstance(event, LogEvent):
                self._console.print(event.message, style=_RICH_STYLES.get(event.style), markup=False, highlight=False)
            elif isinstance(event, ProgressStartEvent):
                self._operations.start(event.short_description, event.status, event.operation_id, event.parent_id)
            elif isinstance(event, ProgressCompleteEvent):
                self._operations.complete(event.operation_id)
            elif isinstance(event, EndOutputEvent):
                self._console.file.flush()


@app.callback()
def main() -> None:
    """Live terminal build progress."""


@app.command()
def demo(
    workers: int = typer.Option(4, "--workers", "-w", min=1, help="Concurrent simulated workers"),
    tasks: int = typer.Option(12, "--tasks", "-t", min=0, help="Number of simulated tasks"),
    seed: Optional[int] = typer.Option(None, "--seed", help="Random seed for task durations"),
    throttle_ms: Optional[int] = typer.Option(None, "--throttle-ms", min=0, help="Minimum interval between redraws"),
    pace: float = typer.Option(1.0, "--pace", min=0.0, help="Multiplier for simulated task durations"),
    fail: bool = typer.Option(False, "--fail", help="Inject a protocol violation at the end of the build"),
    log_file: Optional[str] = typer.Option(None, "--log-file", help="Write debug logging to this file"),
) -> None:
    """Simulate a build and render its progress."""
    if log_file:
        logging.basicConfig(
            filename=log_file,
            level=logging.DEBUG,
            format="%(asctime)s %(threadName)s %(name)s %(levelname)s %(message)s",
        )

    err_console = Console(stderr=True)
    settings = ConsoleSettings.from_env()
    settings.worker_lines = workers
    if throttle_ms is not None:
        settings.throttle_ms = throttle_ms

    renderer = create_progress_renderer(settings=settings)
    listener = renderer if renderer is not None else PlainOutputListener(Console())
    factory = ProgressLoggerFactory(listener)
    rng = random.Random(seed)
    durations = [rng.uniform(0.05, 0.4) * pace for _ in range(tasks)]

    try:
        _run_build(factory, workers, durations)
        if fail:
            if renderer is not None:
                renderer.flush()
            listener.on_output(ProgressCompleteEvent("no-such-operation"))
            if renderer is not None:
                renderer.flush()
        factory.end()
    except ProgressProtocolError as exc:
        logger.error("Progress output failed: %s", exc)
        err_console.print(f"Progress output failed: {exc}", style="red", markup=False, highlight=False)
        raise typer.Exit(1)
    finally:
        if renderer is not None:
            renderer.close()

    if renderer is not None and renderer.failed:
        raise typer.Exit(1)


def _run_build(factory: ProgressLoggerFactory, workers: int, durations: list[float]) -> None:
    bar = ProgressBar(len(durations), "EXECUTING")
    bar_lock = threading.Lock()
    with factory.start("Build", "INITIALIZING") as build:
        factory.log("Configuring simulated project", Style.DESCRIPTION)
        build.progress(bar.progress)

        def run_task(index: int, duration: float) -> None:
            name = f":module{index % 3}:{_STEPS[index % len(_STEPS)]}{index}"
            with factory.start(name, parent=build) as task:
                steps = 3
                for step in range(steps):
                    with factory.start(name, f"step {step + 1}/{steps}", parent=task) as child:
                        time.sleep(duration / steps)
                        child.progress(f"step {step + 1}/{steps} done")
            factory.log(f"> Task {name}", Style.HEADER)
            with bar_lock:
                build.progress(bar.increment_and_get_progress())

        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="worker") as pool:
            futures = [pool.submit(run_task, index, duration) for index, duration in enumerate(durations)]
            for future in futures:
                future.result()

    factory.log("BUILD SUCCESSFUL", Style.SUCCESS_HEADER)
