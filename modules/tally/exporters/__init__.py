"""Exporters turning a report document into files."""

from . import pdf_exporter

__all__ = ["pdf_exporter"]
