"""
Search tools for the Project Finder.

This module contains the components of the search pipeline: project root
resolution, filesystem walking, fuzzy ranking, and the workspace file reader.
"""
