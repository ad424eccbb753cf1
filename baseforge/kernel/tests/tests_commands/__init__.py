"""
BaseForge Command test suite: payload extraction and interpretation.
"""
