"""
JSON web interface for the letter-pair lookup tool
"""
