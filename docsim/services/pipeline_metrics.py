"""Per-run stage timing for the analysis pipeline."""
from __future__ import annotations

import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Dict, Iterator, Optional

from docsim.core.logging import LogEvent, get_logger

logger = get_logger(__name__)


@dataclass
class StageMetrics:
    """Metrics for a single pipeline stage."""
    name: str
    execution_time: float = 0.0
    items_in: int = 0
    items_out: int = 0


@dataclass
class PipelineMetrics:
    """Metrics of one pipeline execution; never shared between requests."""
    pipeline_id: str
    start_time: float = field(default_factory=time.perf_counter)
    end_time: Optional[float] = None
    stages: Dict[str, StageMetrics] = field(default_factory=dict)

    @property
    def total_execution_time(self) -> float:
        if self.end_time is None:
            return time.perf_counter() - self.start_time
        return self.end_time - self.start_time

    @property
    def elapsed_ms(self) -> int:
        return int(self.total_execution_time * 1000)

    @contextmanager
    def stage(self, name: str, items_in: int = 0) -> Iterator[StageMetrics]:
        """Time a stage; the caller fills ``items_out`` on the yielded record."""
        metrics = StageMetrics(name=name, items_in=items_in)
        self.stages[name] = metrics
        started = time.perf_counter()
        try:
            yield metrics
        finally:
            metrics.execution_time = time.perf_counter() - started
            logger.debug(
                LogEvent.STAGE_COMPLETED,
                pipeline_id=self.pipeline_id,
                stage=name,
                duration_ms=round(metrics.execution_time * 1000, 3),
                items_in=metrics.items_in,
                items_out=metrics.items_out,
            )

    def finish(self) -> "PipelineMetrics":
        self.end_time = time.perf_counter()
        return self
