"""API middleware and exception handlers"""
