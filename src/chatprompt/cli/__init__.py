"""
Command-line interface for chatprompt.
"""
