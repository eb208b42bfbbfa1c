# SPDX-License-Identifier: Apache-2.0

"""
Domain logic package for the complaint intelligence and lifecycle engine.

This package contains pure business logic functions with no side effects.
Vocabularies and transition tables are module-level constants that are
never mutated, so every function is safe to call from any thread or task.
"""
