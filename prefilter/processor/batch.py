import threading
from collections.abc import Callable, Iterable

from prefilter.detection.models import AnalysisMode
from prefilter.logging.logger import Log
from prefilter.processor.models import AnalysisResult, Screenshot

ProgressCallback = Callable[[int, int], None]
AnalyzeFn = Callable[[Screenshot, AnalysisMode], AnalysisResult]


class BatchAnalyzer:
    """Analyze screenshots one after another under a single mode.

    Sequential on purpose: one decoded raster alive at a time, and progress
    callbacks arrive in order 1..N.
    """

    def __init__(self, analyze: AnalyzeFn, resolve_mode: Callable[[], AnalysisMode]) -> None:
        self._analyze = analyze
        self._resolve_mode = resolve_mode

    def analyze_many(
        self,
        screenshots: Iterable[Screenshot],
        mode: AnalysisMode | None = None,
        on_progress: ProgressCallback | None = None,
        cancel_event: threading.Event | None = None,
    ) -> dict[str, AnalysisResult]:
        """Return results keyed by screenshot id.

        If *cancel_event* gets set, stops before the next screenshot and
        returns what has been analyzed so far.
        """
        pending = list(screenshots)
        total = len(pending)
        effective_mode = mode if mode is not None else self._resolve_mode()
        Log.info(f"Analyzing {total} screenshots in {effective_mode.value} mode")

        results: dict[str, AnalysisResult] = {}
        for current, screenshot in enumerate(pending, start=1):
            if cancel_event is not None and cancel_event.is_set():
                Log.info(f"Batch cancelled after {current - 1} of {total} screenshots")
                break
            results[screenshot.id] = self._analyze(screenshot, effective_mode)
            if on_progress is not None:
                on_progress(current, total)

        blocked = sum(1 for result in results.values() if result.is_sensitive)
        Log.info(f"Batch complete: {len(results)} analyzed, {blocked} blocked")
        return results
