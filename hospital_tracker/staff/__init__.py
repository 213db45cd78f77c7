"""
Hospital personnel records, profession groups and titles.
"""
