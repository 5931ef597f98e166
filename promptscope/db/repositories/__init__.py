"""
Repository layer.

Each module groups plain functions taking a ``Session`` for one aggregate:
categories, prompts, teams, users and audit logs.
"""
