"""MessageRenderer — Jinja2-based renderer for chat messages.

Loads templates from the ``template/`` directory and renders the welcome
text, question steps and result steps into plain-text chat messages.
Short notices (input errors, cancel confirmation) come from
``constants.MESSAGES`` and are rendered with :meth:`notice`.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Mapping

import jinja2

from scoring_rulesets.constants import CANCEL_COMMAND, MESSAGES
from scoring_rulesets.models.session import QuestionStep, ResultStep


class MessageRenderer:
    """Renders driver steps into user-facing message text.

    Args:
        template_dir: optional override for the template directory.
            Defaults to ``template/`` sibling of this module.
    """

    def __init__(self, template_dir: Path | None = None) -> None:
        if template_dir is None:
            template_dir = Path(__file__).parent / "template"
        self._env = jinja2.Environment(
            loader=jinja2.FileSystemLoader(str(template_dir)),
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=False,
        )

    def render(self, template_name: str, **context) -> str:
        """Render a named template with arbitrary context."""
        template = self._env.get_template(template_name)
        return template.render(**context).strip()

    def welcome(self, commands: Mapping[str, str]) -> str:
        """List every test command with its test name."""
        return self.render("welcome.jinja2", commands=commands, cancel_command=CANCEL_COMMAND)

    def question(self, step: QuestionStep) -> str:
        """Number the options of the step's question and append its hint."""
        return self.render("question.jinja2", question=step.question)

    def result(self, step: ResultStep, commands: Iterable[str]) -> str:
        return self.render("result.jinja2", result=step, commands=list(commands))

    @staticmethod
    def notice(key: str, **context) -> str:
        """Format one of the short notices from ``constants.MESSAGES``."""
        return MESSAGES[key].format(**context)
