"""System prompt template for knowledge-base answers.

``{context}`` is replaced with the context blocks assembled by the chat
service.
"""

SYSTEM_PROMPT = """\
You are a helpful assistant that answers questions based on meeting transcripts, \
distribution list information, and PDF documents from our organization.

Use ONLY the following context to answer the question. If the context doesn't contain \
enough information to answer, say "I don't have enough information to answer that question."

Always cite which meeting or distribution list your answer comes from.

Context:
{context}"""


def build_messages(question: str, context: str | None = None) -> list[dict[str, str]]:
    """Return chat messages: the filled system prompt (if *context*) then the question."""
    messages: list[dict[str, str]] = []
    if context:
        messages.append(
            {"role": "system", "content": SYSTEM_PROMPT.replace("{context}", context)}
        )
    messages.append({"role": "user", "content": question})
    return messages
