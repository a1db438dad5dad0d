"""
chatprompt: conversation transcripts and reusable prompt templates with
search and an interchange bridge for IDE workspaces.
"""

__version__ = "0.1.0"
