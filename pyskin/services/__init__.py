"""
Service layer: skin model, evaluation engine and resource lookup.
"""
