"""
Correction through a local command-line tool.

The tool is spawned as ``<command> [--model M] -p "<prompt>\n\nText:\n<text>"``.
Standard output (trimmed) is the corrected text, standard error is only
logged, and the process is killed if it outlives the timeout.
"""

import os
import signal
import subprocess
from typing import List, Optional

from ...utils.logger import get_logger
from ..settings.config import DEFAULT_TIMEOUT_SECONDS
from .result import FailureReason, InvocationResult

logger = get_logger(__name__)

_IS_POSIX = os.name == "posix"


def build_full_prompt(prompt: str, text: str) -> str:
    return f"{prompt}\n\nText:\n{text}"


def build_command(command: str, full_prompt: str, model: str = "") -> List[str]:
    args = [command]
    if model:
        args.extend(["--model", model])
    args.extend(["-p", full_prompt])
    return args


def _kill(process: subprocess.Popen) -> None:
    # The tool may fork helpers that inherit our pipes, so take the whole group down
    try:
        if _IS_POSIX:
            os.killpg(process.pid, signal.SIGKILL)
        else:
            process.kill()
    except (ProcessLookupError, PermissionError):
        process.kill()


def _reap(process: subprocess.Popen) -> None:
    try:
        process.communicate(timeout=1)
    except subprocess.TimeoutExpired:
        logger.warning(f"Process {process.pid} left pipes open after kill")
        for stream in (process.stdout, process.stderr):
            if stream is not None:
                stream.close()
        process.wait()


def process_with_local_command(
    text: str,
    prompt: str,
    command: str,
    model: str = "",
    timeout: Optional[float] = None,
) -> InvocationResult:
    if not text or not text.strip():
        return InvocationResult.original(text, FailureReason.EMPTY_INPUT)

    timeout = DEFAULT_TIMEOUT_SECONDS if timeout is None else timeout
    full_prompt = build_full_prompt(prompt, text)
    args = build_command(command, full_prompt, model)

    logger.debug(
        f"Calling {command} with model '{model or 'default'}', "
        f"prompt length: {len(full_prompt)} chars"
    )

    try:
        process = subprocess.Popen(
            args,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            encoding="utf-8",
            errors="replace",
            start_new_session=_IS_POSIX,
        )
    except FileNotFoundError as e:
        logger.warning(f"{command} not found: {e}")
        return InvocationResult.original(text, FailureReason.UNAVAILABLE)
    except OSError as e:
        logger.error(f"Failed to spawn {command}: {e}", exc_info=True)
        return InvocationResult.original(text, FailureReason.IO_ERROR)

    try:
        stdout, stderr = process.communicate(timeout=timeout)
    except subprocess.TimeoutExpired:
        _kill(process)
        _reap(process)
        logger.warning(f"{command} timed out after {timeout} seconds")
        return InvocationResult.original(text, FailureReason.TIMEOUT)

    if process.returncode != 0:
        logger.warning(
            f"{command} failed (exit code: {process.returncode}): {stderr.strip()}"
        )
        return InvocationResult.original(text, FailureReason.PROCESS_FAILED)

    result = stdout.strip()
    if not result:
        logger.debug(f"{command} returned empty response, using original text")
        return InvocationResult.original(text, FailureReason.PROCESS_FAILED)

    logger.debug(f"{command} succeeded, output length: {len(result)} chars")
    return InvocationResult.corrected(result)
