"""
Grid Editor service: spreadsheet-style edit sessions over remote tables
"""
