"""
BaseForge Store test suite: table lifecycle, field and row mutations, cell edits.
"""
