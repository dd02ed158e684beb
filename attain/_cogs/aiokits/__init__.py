"""
Asyncio primitives that should better be in the standard library.
"""
