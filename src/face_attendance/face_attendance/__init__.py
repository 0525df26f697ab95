"""Face Attendance package.

Feature modules (students, attendance, scanning, ...) keep the matching and
ledger rules in service/repository layers behind a thin Flask controller layer.
"""
