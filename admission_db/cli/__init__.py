"""
Command-line interface for ADMISSION_DB.
"""
