"""Attendance alerts package.

Risk-alert detection and reporting aggregation over attendance history,
organized by feature modules (ranges, alerts, reports, export, ...) with
read-only repository adapters and a thin Flask controller layer.
"""
