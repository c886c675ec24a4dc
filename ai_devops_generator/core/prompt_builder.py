"""
Prompt construction.

Turns a structured generation request into the single prompt string sent
to the provider. The builder is pure: identical requests give identical prompts.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List

from ai_devops_generator.exceptions import InvalidInput

EMPTY_STACK_MESSAGE = "Please describe your technology stack first!"

SECURITY_LINE = "Include security best practices and comments."
MONITORING_LINE = "Include monitoring and logging setup."

REQUIREMENTS_BLOCK = (
    "Requirements:\n"
    "- Add helpful comments explaining each section\n"
    "- Follow industry best practices\n"
    "- Make it production-ready\n"
    "- Include error handling where applicable"
)


class Environment(Enum):
    """Target deployment environments."""
    DEVELOPMENT = "Development"
    STAGING = "Staging"
    PRODUCTION = "Production"


@dataclass(frozen=True)
class GenerationRequest:
    """Structured user input for one generation."""
    use_case: str
    tech_stack_description: str
    environment: Environment = Environment.DEVELOPMENT
    include_security: bool = True
    add_monitoring: bool = False


def build_prompt(request: GenerationRequest) -> str:
    """Compose the prompt for a generation request.

    Lines appear in a fixed order; conditional lines are omitted entirely
    when their flag is off, never left blank.

    Args:
        request: The generation request

    Returns:
        Prompt text

    Raises:
        InvalidInput: If the tech stack description is blank
    """
    stack = (request.tech_stack_description or "").strip()
    if not stack:
        raise InvalidInput(
            detail="tech_stack_description is empty after trimming",
            message=EMPTY_STACK_MESSAGE,
        )

    lines: List[str] = [
        f"Write a complete {request.use_case} for this technology stack: {stack}.",
        "",
        f"Target environment: {request.environment.value}",
    ]
    if request.include_security:
        lines.append(SECURITY_LINE)
    if request.add_monitoring:
        lines.append(MONITORING_LINE)
    lines.append("")
    lines.append(REQUIREMENTS_BLOCK)

    return "\n".join(lines)
