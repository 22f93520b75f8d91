"""
Command-line interface for shell-formatter.
"""
