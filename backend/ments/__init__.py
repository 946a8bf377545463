"""
Ments API backend.
"""
