"""OJT attendance tracker package.

Organized by feature modules (attendance, students, requests, reports, ...)
with a thin Flask controller layer over service/repository layers.
"""
