"""Realtime notifications service.

Keeping this file makes ``app`` a regular package, so imports never resolve to
an unrelated ``app`` namespace package installed in site-packages.
"""
