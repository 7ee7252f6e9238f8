"""Shift attendance engine.

Feature modules (schedules, shifts, attendance, payroll, ...) keep pure domain
logic in services and talk to storage through repository Protocols.
"""
