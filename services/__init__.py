"""
services/ - Business Logic
==========================
Thin layer between callers and the repository contract.
"""
