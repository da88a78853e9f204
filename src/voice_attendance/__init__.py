"""Voice attendance package.

This package is organized by feature modules (users, attendance, sessions,
reports, dialogue, voice) with a thin Flask controller layer over
service/repository layers.
"""
