"""Geo Attendance package.

Feature modules (sessions, attendance, excuses, reports) sit on top of pure
verification rules and repository protocols; Flask controllers stay thin.
"""
