"""Chat message rendering.

Provides ``MessageRenderer``, a Jinja2-based template engine that renders
question and result steps into the plain-text messages sent to the user.
"""

from scoring_rulesets.prompt.manager import MessageRenderer

__all__ = ["MessageRenderer"]
