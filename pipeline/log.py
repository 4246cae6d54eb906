# pipeline/log.py
#
# Shared collector logger with elapsed time.
#
# Design decisions:
#   - Single log() function used by adapters, orchestrator and scheduler.
#   - Elapsed time is shown so the operator can see how long each batch takes.
#   - No external dependencies: plain stdout with flush for immediate visibility.
#   - nivel is only printed when it is not INFO, so the common line stays short.
from __future__ import annotations

import sys
import time

_start = time.monotonic()


def log(message: str, *, nivel: str = "INFO") -> None:
    """Write a timestamped log line to stdout."""
    elapsed = time.monotonic() - _start
    minutes, seconds = divmod(int(elapsed), 60)
    prefixo = "" if nivel == "INFO" else f"{nivel}: "
    sys.stdout.write(f"[coleta {minutes:02d}:{seconds:02d}] {prefixo}{message}\n")
    sys.stdout.flush()
