"""
Tracking API Views Package
"""
