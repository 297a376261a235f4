"""
podmix - timeline and mixing engine for multi-track spoken-word audio.
"""
__version__ = "0.1.0"
