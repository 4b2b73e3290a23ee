"""Utility toolkit for field services: logging, files, Modbus, AMF3, camera snapshots, agent messages, service control and archives."""

__version__ = "0.1.0"