"""Progress and summary reporting for validation runs."""

from logging_setup import get_logger, write_progress
from models import ValidationOutcome


class ProgressReporter:
    """Receives each outcome as it completes."""

    def __init__(self, total: int, show_progress: bool = True, bar_width: int = 40):
        self.total = total
        self.show_progress = show_progress
        self.bar_width = bar_width
        self.completed = 0
        self.failed = 0

    def on_outcome(self, outcome: ValidationOutcome) -> None:
        self.completed += 1
        error = outcome.error
        if error is not None:
            self.failed += 1
            if self.show_progress:
                print()  # Keep the failure off the progress line
            get_logger().warning("%s: %s", outcome.url, error.reason)

        if self.show_progress and self.total:
            filled = int(self.bar_width * self.completed / self.total)
            bar = "█" * filled + "░" * (self.bar_width - filled)
            write_progress(f"Validating: [{bar}] {self.completed}/{self.total} ({self.failed} failed)")
            if self.completed == self.total:
                print()


def summarize(outcomes: list[ValidationOutcome]) -> list[ValidationOutcome]:
    """Log a summary of the run and return the failed outcomes."""
    logger = get_logger()
    failures = [o for o in outcomes if not o.succeeded]

    logger.info("")
    logger.info("=" * 50)
    logger.info("Validation Summary")
    logger.info("=" * 50)
    logger.info("Packages checked: %d", len(outcomes))
    logger.info("Passed: %d", len(outcomes) - len(failures))

    if failures:
        logger.warning("Failed: %d", len(failures))
        for outcome in failures:
            logger.warning("  %s [%s] %s", outcome.url, outcome.error.tag, outcome.error.reason)

    return failures
