"""
Search across conversations, prompts and messages, plus autocomplete suggestions.
"""
