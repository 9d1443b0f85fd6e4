"""Stylesheet and scripts inlined into every rendered document."""
