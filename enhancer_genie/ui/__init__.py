"""
Flet user interface for Enhancer Genie
"""
