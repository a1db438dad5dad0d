"""
Flask blueprints for the chatprompt API.
"""
