"""
tokenkeeper.api

HTTP host layer (FastAPI) around the token core.
"""
