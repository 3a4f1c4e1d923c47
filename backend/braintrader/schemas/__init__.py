"""
Pydantic schemas for the Braintrader API
"""
