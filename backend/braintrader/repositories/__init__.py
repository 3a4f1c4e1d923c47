"""
Repositories for Braintrader
"""
