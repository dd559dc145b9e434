"""Internal implementation package for eartri.

Import public names from the top-level ``eartri`` package; the module layout
here may change.
"""
