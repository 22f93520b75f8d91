"""
Test package for shell-formatter.

This package contains:
- Unit tests for the splitter, normalizer, indenter and formatter
- Integration tests for dispatch, Dockerfile, Markdown and the CLI
- Property-based tests using Hypothesis
"""
