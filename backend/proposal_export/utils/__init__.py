"""Export engine utilities"""
