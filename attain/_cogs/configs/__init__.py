"""
Configuration of the engines: the settings as the runtime sees them.
"""
