from __future__ import annotations

"""Skill metrics kept in process and rendered in Prometheus text format.

Only what the skill reports: intent outcomes, hub request latency per
endpoint, probe failures.
"""

from collections import defaultdict
from dataclasses import dataclass
from threading import Lock
from typing import Dict, Literal, Tuple


LabelKey = Tuple[Tuple[str, str], ...]
Kind = Literal["counter", "summary"]

INTENTS_TOTAL = "ha_intents_total"
REQUEST_SECONDS = "ha_request_seconds"
PROBE_FAILURES_TOTAL = "ha_probe_failures_total"

_HELP = {
    INTENTS_TOTAL: "Intents forwarded to Home Assistant by outcome.",
    REQUEST_SECONDS: "Time spent on Home Assistant HTTP calls.",
    PROBE_FAILURES_TOTAL: "Failed Home Assistant connectivity checks.",
}


def _escape(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")


def _render_labels(labels: LabelKey) -> str:
    if not labels:
        return ""
    return "{" + ",".join(f'{k}="{_escape(v)}"' for k, v in labels) + "}"


@dataclass
class _Series:
    count: float = 0.0
    total: float = 0.0


class Metrics:
    """Thread-safe registry; counters keep `total`, summaries also `count`."""

    def __init__(self) -> None:
        self._lock = Lock()
        self._kinds: Dict[str, Kind] = {}
        self._series: Dict[str, Dict[LabelKey, _Series]] = defaultdict(dict)

    def _point(self, name: str, kind: Kind, labels: Dict[str, str] | None) -> _Series:
        registered = self._kinds.setdefault(name, kind)
        if registered != kind:
            raise ValueError(f"metric {name} already registered as {registered}")
        key = tuple(sorted((labels or {}).items()))
        return self._series[name].setdefault(key, _Series())

    def inc(self, name: str, *, labels: Dict[str, str] | None = None, value: float = 1.0) -> None:
        with self._lock:
            self._point(name, "counter", labels).total += value

    def observe(self, name: str, value: float, *, labels: Dict[str, str] | None = None) -> None:
        with self._lock:
            point = self._point(name, "summary", labels)
            point.count += 1.0
            point.total += float(value)

    def counter_value(self, name: str, *, labels: Dict[str, str] | None = None) -> float:
        key = tuple(sorted((labels or {}).items()))
        with self._lock:
            point = self._series.get(name, {}).get(key)
            return point.total if point else 0.0

    def reset(self) -> None:
        with self._lock:
            self._kinds.clear()
            self._series.clear()

    def to_prometheus(self) -> str:
        lines: list[str] = []
        with self._lock:
            for name in sorted(self._kinds):
                kind = self._kinds[name]
                if name in _HELP:
                    lines.append(f"# HELP {name} {_HELP[name]}")
                lines.append(f"# TYPE {name} {kind}")
                for labels, point in sorted(self._series[name].items()):
                    rendered = _render_labels(labels)
                    if kind == "counter":
                        lines.append(f"{name}{rendered} {point.total}")
                    else:
                        lines.append(f"{name}_count{rendered} {point.count}")
                        lines.append(f"{name}_sum{rendered} {point.total}")
        return "\n".join(lines) + "\n"

    def record_intent(self, outcome: str) -> None:
        self.inc(INTENTS_TOTAL, labels={"outcome": outcome})

    def record_request(self, endpoint: str, seconds: float) -> None:
        self.observe(REQUEST_SECONDS, seconds, labels={"endpoint": endpoint})

    def record_probe_failure(self) -> None:
        self.inc(PROBE_FAILURES_TOTAL)


metrics = Metrics()
