"""
Prompt category scope and visibility service.

Decides which scoped container a prompt belongs to, who may manage it, and
how many prompts inside it each viewer can see.
"""

__version__ = "1.0.0"
