"""
Chart projection for chat results.

Turns the rawData of a market-data tool call into a chart-ready series. The
rules are fixed:

- composite market updates chart their topStocks / topCryptos list
- only successful quote entries are charted
- a first entry with more than one history point gives a line chart over the
  first entry's dates, other entries aligned by date
- otherwise a bar chart of current prices
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class ChartDataset:
    label: str
    values: List[Optional[float]]
    color: str

    def to_dict(self) -> Dict[str, Any]:
        return {"label": self.label, "values": self.values, "color": self.color}


@dataclass
class ChartSeries:
    title: str
    type: str  # "line" or "bar"
    labels: List[str]
    datasets: List[ChartDataset] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "type": self.type,
            "labels": self.labels,
            "datasets": [d.to_dict() for d in self.datasets],
        }


def series_color(index: int, count: int) -> str:
    hue = int(index * 360 / count) if count else 0
    return f"hsl({hue}, 70%, 50%)"


def _quote_entries(raw_data: Any) -> List[Dict[str, Any]]:
    if isinstance(raw_data, dict):
        for key in ("topStocks", "topCryptos"):
            if key in raw_data:
                return _quote_entries(raw_data[key])
        return []
    if not isinstance(raw_data, list):
        return []
    return [
        entry
        for entry in raw_data
        if isinstance(entry, dict) and "error" not in entry and entry.get("currentPrice") is not None
    ]


def _label(entry: Dict[str, Any]) -> str:
    return entry.get("displayName") or entry.get("name") or entry.get("symbol") or "?"


def project_chart(raw_data: Any) -> Optional[ChartSeries]:
    """Build a ChartSeries from tool rawData, or None when nothing is chartable."""
    entries = _quote_entries(raw_data)
    if not entries:
        return None

    names = ", ".join(_label(e) for e in entries)
    count = len(entries)
    first_history = entries[0].get("history") or []

    if len(first_history) > 1:
        labels = [point["timestamp"] for point in first_history]
        datasets = []
        for i, entry in enumerate(entries):
            by_date = {point["timestamp"]: point["price"] for point in entry.get("history") or []}
            datasets.append(
                ChartDataset(
                    label=_label(entry),
                    values=[by_date.get(date) for date in labels],
                    color=series_color(i, count),
                )
            )
        return ChartSeries(title=f"{names} Price History", type="line", labels=labels, datasets=datasets)

    return ChartSeries(
        title=f"{names} Current Price",
        type="bar",
        labels=[_label(e) for e in entries],
        datasets=[
            ChartDataset(
                label="Current Price",
                values=[float(e["currentPrice"]) for e in entries],
                color=series_color(0, 1),
            )
        ],
    )
