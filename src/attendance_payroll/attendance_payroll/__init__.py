"""Attendance & Payroll package.

This package is organized by feature modules (attendance, leaves, employees,
payroll, payslip) with a thin Flask controller layer on top of service and
repository layers. The status resolver, the monthly aggregator and the accrual
engine are pure and never touch the database.
"""
