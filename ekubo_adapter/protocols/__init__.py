"""
Protocol implementations
"""
