"""Prompt construction for chat completions."""

from xiaoniu.config import PersonaConfig
from xiaoniu.domain.entities import RoleTag
from xiaoniu.infrastructure.llm.templates import create_jinja_env


class PromptBuilder:
    """Builds the ordered message list sent to the model.

    The system prompt is rendered from ``system_prompt.j2`` with the persona,
    the group rules when answering in a group, and an optional hint about who
    is speaking.
    """

    def __init__(self, persona: PersonaConfig) -> None:
        """Initialize the builder.

        Args:
            persona: Bot persona configuration.
        """
        self._persona = persona
        self._jinja_env = create_jinja_env()
        self._system_template = self._jinja_env.get_template("system_prompt.j2")
        self._role_hint_template = self._jinja_env.get_template("role_hint.j2")
        self._relay_hint_template = self._jinja_env.get_template("relay_hint.j2")

    def system_prompt(self, is_group: bool, hint: str = "") -> str:
        """Render the system prompt."""
        return self._system_template.render(
            persona=self._persona,
            is_group=is_group,
            hint=hint,
        ).strip()

    def role_hint(self, role: RoleTag) -> str:
        """Describe the speaker's relationship to the bot."""
        return self._role_hint_template.render(
            persona=self._persona,
            role=role,
        ).strip()

    def relay_hint(self) -> str:
        """Ask the model to summarize why someone mentioned the master."""
        return self._relay_hint_template.render(persona=self._persona).strip()

    def build_messages(
        self,
        current: str,
        *,
        is_group: bool = False,
        hint: str = "",
        history: list[dict[str, str]] | None = None,
        context: str = "",
    ) -> list[dict[str, str]]:
        """Assemble the messages for one completion.

        Args:
            current: The turn to answer.
            is_group: Include the group chat rules in the system prompt.
            hint: Speaker hint appended to the system prompt.
            history: Earlier private turns, oldest first.
            context: Rendered group history, sent as one user turn.

        Returns:
            ``[system] + history + [context] + [current]`` as role/content dicts.
        """
        messages = [
            {"role": "system", "content": self.system_prompt(is_group, hint)}
        ]
        if history:
            messages.extend(history)
        if context:
            messages.append({"role": "user", "content": context})
        messages.append({"role": "user", "content": current})
        return messages
