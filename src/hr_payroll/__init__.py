"""HR Payroll package.

This package is organized by feature modules (attendance, payroll, leaves, ...)
with a thin Flask controller layer over service/repository layers. The payroll
and leave rules live in pure modules that never touch the database.
"""
