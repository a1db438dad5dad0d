"""
Read models shared by services, the API and the CLI.
"""
