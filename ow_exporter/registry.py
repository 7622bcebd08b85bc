"""In-process store of the latest value per (series, labels) key."""
import threading
from typing import Dict, Iterable, Mapping, Tuple, Union

from ow_exporter.series import CATALOG, Labels, Observation


def _normalize_labels(series: str, labels: Union[Labels, Mapping[str, str]]) -> Labels:
    """Canonical label order: the catalog order for known series, sorted otherwise."""
    items = labels.items() if isinstance(labels, Mapping) else labels
    pairs = {str(k): str(v) for k, v in items}
    spec = CATALOG.get(series)
    if spec is not None and set(pairs) == set(spec.label_names):
        names = spec.label_names
    else:
        names = sorted(pairs)
    return tuple((name, pairs[name]) for name in names)


class MetricRegistry:
    """Thread-safe mapping from (series, labels) to the last written value.

    Entries are never deleted: a key keeps its last value until it is
    overwritten, so a failed refresh leaves stale values rather than gaps.
    """

    def __init__(self):
        self._lock = threading.Lock()
        # dicts keep insertion order, so snapshots list keys in first-write order
        self._values: Dict[Tuple[str, Labels], float] = {}

    def set(self, series: str, labels: Union[Labels, Mapping[str, str]], value: float) -> None:
        """Create or overwrite the entry for (series, labels)."""
        key = (series, _normalize_labels(series, labels))
        value = float(value)
        with self._lock:
            self._values[key] = value

    def set_many(self, observations: Iterable[Observation]) -> int:
        """Write each observation in order; returns how many were written."""
        count = 0
        for obs in observations:
            self.set(obs.series, obs.labels, obs.value)
            count += 1
        return count

    def snapshot(self) -> Tuple[Observation, ...]:
        """Return an immutable copy of all current entries."""
        with self._lock:
            items = list(self._values.items())
        return tuple(Observation(series, labels, value) for (series, labels), value in items)

    def get(self, series: str, labels: Union[Labels, Mapping[str, str]]):
        with self._lock:
            return self._values.get((series, _normalize_labels(series, labels)))

    def __len__(self) -> int:
        with self._lock:
            return len(self._values)
