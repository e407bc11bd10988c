"""
ABT Analytics Dashboard
"""
