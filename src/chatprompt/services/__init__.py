"""
Record-level services for conversations, prompts and the dashboard.
"""
