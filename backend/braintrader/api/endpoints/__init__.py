"""API endpoint modules"""
