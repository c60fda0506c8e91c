"""
crntracker - live seat availability for course sections, in the terminal.
"""
