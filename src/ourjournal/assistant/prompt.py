"""Prompt assembly for the journal assistant.

Section order is fixed: persona, task instructions, conversation history,
journal excerpts, the live question, then the answer cue. Instructions come
before context and context before the question.
"""

from __future__ import annotations

from ourjournal.journal.models import Author

from .formatter import GroundingContext

ANSWER_CUE = "Assistant's Response:"


def persona_section(asking_user: Author) -> str:
    names = " and ".join(a.value for a in Author)
    return (
        f"You are a helpful, empathetic, and thoughtful AI assistant for {names}. "
        f"You have access to their shared journal when excerpts are provided below. "
        f"The person currently asking is {asking_user.value}."
    )


def task_section(asking_user: Author) -> str:
    name = asking_user.value
    return f"""Your goal is to be a supportive assistant to {name}.
1. Understand the query using the conversation history and the journal excerpts.
2. If the query asks for something present in the 'Relevant Journal Entries' section, answer from those entries accurately.
3. If the context says no matching entries were found, or that entries could not be retrieved, say so clearly.
4. For general chat, respond naturally as a conversation partner.
5. If {name} asks for advice or ideas, or could benefit from a suggestion, you may offer helpful and empathetic suggestions beyond what the journal says. Mark them as suggestions (for example "Maybe you could try...", "One idea might be...").
6. Never invent journal entries or present a suggestion as something that was written in the journal."""


def question_section(asking_user: Author, question: str) -> str:
    return f'{asking_user.value}\'s current query: "{question}"'


def assemble_prompt(asking_user: Author, context: GroundingContext, question: str) -> str:
    """Compose the full instruction document sent to the generation backend."""
    sections = [
        persona_section(asking_user),
        task_section(asking_user),
    ]
    if context.history:
        sections.append(context.history.rstrip("\n"))
    sections.append(context.entries.rstrip("\n"))
    sections.append(question_section(asking_user, question))
    sections.append(ANSWER_CUE)
    return "\n\n".join(sections)
