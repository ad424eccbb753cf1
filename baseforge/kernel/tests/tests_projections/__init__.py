"""
BaseForge Projection test suite: grid, kanban, gantt and dashboard.
"""
