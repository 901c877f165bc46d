"""Application state: one immutable snapshot, replaced by named commands.

Every mutation goes through ``AppStore.dispatch``. A command computes a
whole new snapshot from the current one; the swap happens under a lock, so
a command that raises leaves the previous snapshot in place.
"""
from __future__ import annotations

import json
import logging
import threading
from dataclasses import dataclass, replace
from pathlib import Path

from pydantic import BaseModel, ValidationError

from chartwise.domain.exceptions import ChartConfigError, NotFoundError
from chartwise.models.chart import ChartConfig
from chartwise.models.dataset import Dataset
from chartwise.models.insight import AnalysisResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StoreSnapshot:
    dataset: Dataset | None = None
    charts: tuple[ChartConfig, ...] = ()
    analysis: AnalysisResult | None = None
    insights_loading: bool = False
    dark_mode: bool = False
    version: int = 0

    def chart(self, chart_id: str) -> ChartConfig | None:
        return next((c for c in self.charts if c.id == chart_id), None)


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class LoadDataset:
    """Replace the dataset. Charts are kept; AI results are cleared."""

    dataset: Dataset

    def apply(self, state: StoreSnapshot) -> StoreSnapshot:
        return replace(state, dataset=self.dataset, analysis=None, insights_loading=False)


@dataclass(frozen=True)
class ClearDataset:
    def apply(self, state: StoreSnapshot) -> StoreSnapshot:
        return replace(state, dataset=None, analysis=None, insights_loading=False)


@dataclass(frozen=True)
class AddChart:
    chart: ChartConfig

    def apply(self, state: StoreSnapshot) -> StoreSnapshot:
        if state.chart(self.chart.id) is not None:
            raise ChartConfigError(f"Chart {self.chart.id} already exists")
        return replace(state, charts=state.charts + (self.chart,))


@dataclass(frozen=True)
class UpdateChart:
    chart: ChartConfig

    def apply(self, state: StoreSnapshot) -> StoreSnapshot:
        if state.chart(self.chart.id) is None:
            raise NotFoundError(f"Chart {self.chart.id} not found")
        charts = tuple(self.chart if c.id == self.chart.id else c for c in state.charts)
        return replace(state, charts=charts)


@dataclass(frozen=True)
class RemoveChart:
    chart_id: str

    def apply(self, state: StoreSnapshot) -> StoreSnapshot:
        if state.chart(self.chart_id) is None:
            raise NotFoundError(f"Chart {self.chart_id} not found")
        return replace(state, charts=tuple(c for c in state.charts if c.id != self.chart_id))


@dataclass(frozen=True)
class SetAnalysis:
    """Attach an analysis to the dataset it was computed from.

    When ``dataset`` is given and is no longer the loaded one, the result is
    stale and the snapshot is left unchanged.
    """

    analysis: AnalysisResult | None
    dataset: Dataset | None = None

    def apply(self, state: StoreSnapshot) -> StoreSnapshot:
        if self.dataset is not None and state.dataset is not self.dataset:
            logger.info("Dropping analysis for a dataset that is no longer loaded")
            return state
        return replace(state, analysis=self.analysis, insights_loading=False)


@dataclass(frozen=True)
class SetInsightsLoading:
    loading: bool

    def apply(self, state: StoreSnapshot) -> StoreSnapshot:
        return replace(state, insights_loading=self.loading)


@dataclass(frozen=True)
class SetDarkMode:
    enabled: bool

    def apply(self, state: StoreSnapshot) -> StoreSnapshot:
        return replace(state, dark_mode=self.enabled)


@dataclass(frozen=True)
class ToggleDarkMode:
    def apply(self, state: StoreSnapshot) -> StoreSnapshot:
        return replace(state, dark_mode=not state.dark_mode)


Command = (
    LoadDataset | ClearDataset | AddChart | UpdateChart | RemoveChart
    | SetAnalysis | SetInsightsLoading | SetDarkMode | ToggleDarkMode
)


# ---------------------------------------------------------------------------
# Persisted preferences
# ---------------------------------------------------------------------------

class Preferences(BaseModel):
    dark_mode: bool = False


class PreferencesStore:
    """Reads and writes ``preferences.json``. Only dark mode is persisted."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def load(self) -> Preferences:
        if not self.path.exists():
            return Preferences()
        try:
            return Preferences.model_validate(json.loads(self.path.read_text(encoding="utf-8")))
        except (json.JSONDecodeError, ValidationError) as exc:
            logger.warning("Ignoring unreadable preferences file %s: %s", self.path, exc)
            return Preferences()

    def save(self, preferences: Preferences) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(preferences.model_dump_json(indent=2), encoding="utf-8")


# ---------------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------------

class AppStore:
    def __init__(self, preferences: PreferencesStore | None = None) -> None:
        self._preferences = preferences
        dark_mode = preferences.load().dark_mode if preferences is not None else False
        self._snapshot = StoreSnapshot(dark_mode=dark_mode)
        self._lock = threading.Lock()

    @property
    def snapshot(self) -> StoreSnapshot:
        return self._snapshot

    def dispatch(self, command: Command) -> StoreSnapshot:
        with self._lock:
            current = self._snapshot
            updated = command.apply(current)
            if self._preferences is not None and updated.dark_mode != current.dark_mode:
                self._preferences.save(Preferences(dark_mode=updated.dark_mode))
            self._snapshot = replace(updated, version=current.version + 1)
            logger.debug("Applied %s (version %d)", type(command).__name__, self._snapshot.version)
            return self._snapshot
