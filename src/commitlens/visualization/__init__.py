"""Coordinate mapping between commit data and plot pixel space."""

from commitlens.visualization.scales import CoordinateMapper, LinearScale, TimeScale, time_extent

__all__ = ["CoordinateMapper", "LinearScale", "TimeScale", "time_extent"]
