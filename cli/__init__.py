"""
Command-line interface for the letter-pair lookup tool
"""
