from __future__ import annotations

from typing import Protocol

from .models import Segment


class SegmentProducer(Protocol):
    def produce(self, job_id: str, segment: Segment) -> str:
        """Render one segment and return a reference to its artifact."""


class SegmentAssembler(Protocol):
    def assemble(self, job_id: str, artifacts: list[str]) -> str:
        """Join segment artifacts in order and return the final artifact reference."""
