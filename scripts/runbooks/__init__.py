"""
Runbook entry points. Each module exposes ``build_parser``, ``run`` and ``main``.
"""
