"""MCS Builder - natural-language building for Minecraft via Claude"""

__version__ = "0.1.0"
