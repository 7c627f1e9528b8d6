"""Turns upload attempts into a pass/fail verdict with diagnostics."""
import json
import logging
from typing import List, Sequence, Tuple

from ..models import RunResult, UploadAttempt

logger = logging.getLogger(__name__)

SUCCESS_MESSAGE = "✔ All files uploaded successfully."
FAILURE_MESSAGE = "Some files failed to upload."


def format_response_body(body: str) -> str:
    """Pretty-print a JSON body; anything that does not parse is returned untouched."""
    try:
        parsed = json.loads(body)
    except ValueError:
        return body
    return json.dumps(parsed, indent=2)


def format_failure(attempt: UploadAttempt) -> str:
    response = attempt.response
    return (
        f"{attempt.file.name}: {response.status} ({response.status_text})\n"
        f"{format_response_body(response.body)}"
    )


def partition_attempts(
    attempts: Sequence[UploadAttempt],
) -> Tuple[List[UploadAttempt], List[UploadAttempt]]:
    ok = [attempt for attempt in attempts if attempt.ok]
    failed = [attempt for attempt in attempts if not attempt.ok]
    return ok, failed


class ResultReporter:
    """Logs the outcome of an upload batch and decides the run result."""

    def report(self, attempts: Sequence[UploadAttempt]) -> RunResult:
        _, failed = partition_attempts(attempts)
        if not failed:
            logger.info(SUCCESS_MESSAGE)
            return RunResult.ok(list(attempts), SUCCESS_MESSAGE)

        plural = "" if len(failed) == 1 else "s"
        logger.error(f"Failed to upload {len(failed)} file{plural}:")
        for attempt in failed:
            logger.error(format_failure(attempt))
        return RunResult.upload_failed(list(attempts), FAILURE_MESSAGE)
