"""Configuration, errors and FastAPI dependencies"""
