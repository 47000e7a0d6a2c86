# service/__init__.py
"""
HTTP service exposing the ATS engine
"""
