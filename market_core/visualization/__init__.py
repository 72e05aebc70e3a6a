from market_core.visualization.chart_series import ChartDataset, ChartSeries, project_chart

__all__ = ["ChartDataset", "ChartSeries", "project_chart"]
