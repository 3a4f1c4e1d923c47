"""Database engine and declarative base"""
