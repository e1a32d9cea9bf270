"""
Core type definitions for flowlint.

This module contains the type aliases shared across the scanner,
validators and compiler pass.
"""

TypeName = str

# Argument text keyed by parameter name
ArgumentBindings = dict[str, str]
