"""QR Attendance package.

Organized by feature modules (employees, attendance, scanner, mirror)
with a thin Flask controller layer over service/repository layers.
"""
