"""
Gantt intervals and the per-unit execution log of a single run.
"""

from __future__ import annotations

from typing import Dict, List, Optional

from .core import (
    CONTEXT_SWITCH_COLOR, IDLE_COLOR, ExecutionLogEntry, GanttEntry, Process, SliceKind,
)


class TimelineRecorder:
    """Collects Gantt intervals and the per-unit execution log for one run.

    Intervals are appended per core in increasing time order. An execution
    or idle interval that starts where the same core's previous interval
    ended, and shows the same activity, extends that interval instead of
    opening a new one. Every context switch keeps its own entry.
    """

    def __init__(self) -> None:
        self._entries: List[GanttEntry] = []
        self._last_by_core: Dict[int, GanttEntry] = {}
        self._log: List[ExecutionLogEntry] = []

    def _append(self, entry: GanttEntry) -> None:
        if entry.end <= entry.start:
            return
        last = self._last_by_core.get(entry.core_id)
        if last is not None and entry.start < last.end:
            raise ValueError(
                f"core {entry.core_id}: interval [{entry.start}, {entry.end}) overlaps [{last.start}, {last.end})"
            )
        if (last is not None and last.end == entry.start and last.same_lane(entry)
                and entry.kind is not SliceKind.CONTEXT_SWITCH):
            last.end = entry.end
            return
        self._entries.append(entry)
        self._last_by_core[entry.core_id] = entry

    def execute(self, core_id: int, process: Process, start: int, end: int) -> None:
        """Record process running on core_id during [start, end).

        Must be called before the driver decrements remaining_time so the
        log can number the cycles.
        """
        done_before = process.burst_time - process.remaining_time
        self._append(GanttEntry(
            core_id=core_id, start=start, end=end, kind=SliceKind.EXECUTION,
            label=process.name, color=process.color, process_id=process.pid,
        ))
        for offset, t in enumerate(range(start, end)):
            self._log.append(ExecutionLogEntry(
                time=t, core_id=core_id, kind=SliceKind.EXECUTION,
                process_id=process.pid, process_name=process.name,
                cycle=done_before + offset + 1, total_cycles=process.burst_time,
            ))

    def idle(self, core_id: int, start: int, end: int) -> None:
        self._append(GanttEntry(
            core_id=core_id, start=start, end=end, kind=SliceKind.IDLE,
            label="Idle", color=IDLE_COLOR,
        ))
        self._log.extend(ExecutionLogEntry(time=t, core_id=core_id, kind=SliceKind.IDLE)
                         for t in range(start, end))

    def context_switch(self, core_id: int, start: int, end: int) -> None:
        self._append(GanttEntry(
            core_id=core_id, start=start, end=end, kind=SliceKind.CONTEXT_SWITCH,
            label="CS", color=CONTEXT_SWITCH_COLOR,
        ))
        self._log.extend(ExecutionLogEntry(time=t, core_id=core_id, kind=SliceKind.CONTEXT_SWITCH)
                         for t in range(start, end))

    def last_entry(self, core_id: int) -> Optional[GanttEntry]:
        return self._last_by_core.get(core_id)

    def gantt_chart(self) -> List[GanttEntry]:
        """Entries ordered by start time, then core id."""
        return sorted(self._entries, key=lambda e: (e.start, e.core_id))

    def execution_log(self) -> List[ExecutionLogEntry]:
        return sorted(self._log, key=lambda e: (e.time, e.core_id))
