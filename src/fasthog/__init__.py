"""fasthog - A fast secrets scanner for source trees.

fasthog walks a directory, selects source files by extension, and runs every
line through a staged regular-expression pipeline (fast screen, strict
extraction, exclusion veto) to find hardcoded credentials and tokens.
"""

__version__ = "1.0.0"
