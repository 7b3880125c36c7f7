"""Recruit Portal package.

Organized by feature modules (billing, timesheets, aggregation, invoices, ...)
with a thin Flask controller layer over service/repository layers.
"""
