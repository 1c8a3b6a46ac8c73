"""
Sports rights and pricing administration backend.
"""
