"""Exporters for delivering events to backends."""

from spanhive.exporter.console_exporter import ConsoleExporter
from spanhive.exporter.otlp_exporter import OTelBridgeExporter, OTLPExporter

__all__ = ["ConsoleExporter", "OTelBridgeExporter", "OTLPExporter"]
