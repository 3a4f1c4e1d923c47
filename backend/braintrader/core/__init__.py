"""Core settings, security and error types"""
