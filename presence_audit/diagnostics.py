"""
Diagnostic sinks for scoring traces.

Each topic scorer reports (topic, inputs hash, intermediate values, final
score) to a sink. Scorers only know the DiagnosticSink interface; the default
sink writes structured log events, MemorySink keeps traces for tests.
"""
import hashlib
import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from pydantic import BaseModel

from .audit_logging import get_logger

logger = get_logger(__name__)


@dataclass
class ScoreTrace:
    topic: str
    inputs_hash: str
    intermediates: Dict[str, Any] = field(default_factory=dict)
    score: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "topic": self.topic,
            "inputs_hash": self.inputs_hash,
            "intermediates": self.intermediates,
            "score": self.score,
        }


class DiagnosticSink:
    """Receives one trace per computed topic score."""

    def record(self, trace: ScoreTrace) -> None:
        raise NotImplementedError


class StructlogSink(DiagnosticSink):
    def record(self, trace: ScoreTrace) -> None:
        logger.debug("topic_scored", **trace.to_dict())


class MemorySink(DiagnosticSink):
    def __init__(self):
        self.traces: List[ScoreTrace] = []

    def record(self, trace: ScoreTrace) -> None:
        self.traces.append(trace)

    def for_topic(self, topic: str) -> List[ScoreTrace]:
        return [t for t in self.traces if t.topic == topic]


DEFAULT_SINK = StructlogSink()


def _jsonable(part: Any) -> Any:
    if isinstance(part, BaseModel):
        return part.model_dump(mode="json")
    if isinstance(part, dict):
        return {str(k): _jsonable(v) for k, v in part.items()}
    return part


def hash_inputs(*parts: Any) -> str:
    """Stable short hash of the scorer inputs (pydantic models or plain data)."""
    payload = json.dumps([_jsonable(p) for p in parts], sort_keys=True, default=str)
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()[:16]


def record_score(
    sink: Optional[DiagnosticSink],
    topic: str,
    inputs: tuple,
    intermediates: Dict[str, Any],
    score: Optional[int],
) -> None:
    (sink or DEFAULT_SINK).record(
        ScoreTrace(
            topic=topic,
            inputs_hash=hash_inputs(*inputs),
            intermediates=intermediates,
            score=score,
        )
    )
