from __future__ import annotations

from pathlib import Path

import pytest

from csv_tally.features.categories import ChartDataItem
from csv_tally.viz.adapter import build_chart_points
from csv_tally.viz.charts import plot_category_bar, plot_category_chart, plot_category_pie

POINTS = build_chart_points(
    [
        ChartDataItem(name="Late", value=5, percentage="50.00"),
        ChartDataItem(name="Lost", value=3, percentage="30.00"),
        ChartDataItem(name="Damaged", value=1, percentage="10.00"),
        ChartDataItem(name="Others", value=10.0, percentage="10.00", is_other=True),
    ],
    active_index=1,
)


def test_plot_category_bar_writes_file(tmp_path: Path) -> None:
    output_path = tmp_path / "figures" / "category_bar.png"

    result = plot_category_bar(POINTS, output_path, title="Reason Analysis")

    assert result == output_path
    assert output_path.exists()


def test_plot_category_pie_writes_file(tmp_path: Path) -> None:
    output_path = tmp_path / "category_pie.png"

    assert plot_category_pie(POINTS, output_path) == output_path
    assert output_path.exists()


def test_empty_points_are_not_plotted(tmp_path: Path) -> None:
    assert plot_category_bar([], tmp_path / "bar.png") is None
    assert plot_category_pie([], tmp_path / "pie.png") is None
    assert not (tmp_path / "bar.png").exists()


def test_plot_category_chart_rejects_unknown_type(tmp_path: Path) -> None:
    with pytest.raises(ValueError, match="Unsupported chart type"):
        plot_category_chart(POINTS, tmp_path / "x.png", chart_type="donut")


def _capture_bar_axes(monkeypatch, tmp_path: Path, *, emphasis: bool):
    captured = {}

    def _keep_figure(figure, path, **_kwargs):
        captured["ax"] = figure.axes[0]
        return path

    monkeypatch.setattr("csv_tally.viz.charts.save_figure", _keep_figure)
    plot_category_bar(POINTS, tmp_path / "bar.png", emphasis=emphasis)
    return captured["ax"]


def test_bar_labels_others_with_its_percentage(monkeypatch, tmp_path: Path) -> None:
    ax = _capture_bar_axes(monkeypatch, tmp_path, emphasis=False)

    assert [text.get_text() for text in ax.texts] == ["5", "3", "1", "10.00%"]
    assert ax.get_ylabel() == "Entries"


def test_bar_axis_label_follows_emphasis(monkeypatch, tmp_path: Path) -> None:
    ax = _capture_bar_axes(monkeypatch, tmp_path, emphasis=True)

    assert ax.get_ylabel() == "Share of entries (scaled %)"
