"""Entrypoint for durable-copy."""

from __future__ import annotations

import logging
import sys

from rich.console import Console

from . import config as cfg
from .errors import CopyFileError
from .file_io import copy_file
from .logging_setup import configure

logger = logging.getLogger(__name__)

console = Console(stderr=True)


def main() -> int:
    config = cfg.load_config()
    configure(config)

    source = config["source"]
    destination = config["destination"]
    try:
        copied = copy_file(source, destination, buffer_size=config["buffer_size"])
    except CopyFileError as exc:
        logger.critical("Copy %s -> %s aborted: %s", source, destination, exc)
        console.print(f"[red]Copy failed ({exc.step}).[/red] {exc}")
        return 1

    console.print(f"[green]Copied.[/green] {source} -> {destination} ({copied} bytes)")
    return 0


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
