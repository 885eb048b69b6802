"""
Web frontend and API server
"""
