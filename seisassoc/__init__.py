"""Seismic association building blocks: DBSCAN, bilinear travel-time tables, station files and picks."""

__version__ = "0.1.0"