"""Progress reporting adapters."""

from photocache.progress.rich_progress import RichProgressReporter


__all__ = ["RichProgressReporter"]
