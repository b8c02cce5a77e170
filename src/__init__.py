"""
skilldown - documentation markup to skill Markdown

Builds agent skills (SKILL.md plus reference files) from converted
documentation pages described by YAML manifests.
"""

__version__ = "1.0.0"

from .lib import markdown_postprocess, skill_build, LOG, WARN, state_connectToLogger

__all__ = ["markdown_postprocess", "skill_build", "LOG", "WARN", "state_connectToLogger", "__version__"]
