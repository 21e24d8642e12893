"""Use-case / operations layer.

The crop controller (parameter store) and the export pipeline that turns
saved parameters into files.
"""
