"""Attendance & Payroll package.

Organized by feature modules (users, attendance, payroll, settings, dashboard)
with a thin Flask JSON controller layer over service/repository layers.
"""
