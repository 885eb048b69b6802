"""
FastAPI backend
"""
