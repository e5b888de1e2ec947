"""
Click commands for autodoc.
"""
