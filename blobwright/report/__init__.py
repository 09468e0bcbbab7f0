"""Blobwright reporting — Rich rendering of run reports and release status.

Modules
-------
renderer
    ``ReportRenderer`` turns a ``RunReport`` into a Rich panel and prints
    errors together with their causes.
"""
