"""
Configuration, constants and shared helpers.
"""
