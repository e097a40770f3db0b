"""
HTTP surface (FastAPI).

Routes are thin: request shaping lives in `models`, behavior in the library modules.
"""
