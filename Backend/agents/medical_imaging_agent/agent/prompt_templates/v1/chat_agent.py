"""
Chat Agent Context Template V1

This module contains the V1 context message that seeds every follow-up
conversation about a previously generated diagnosis.
"""

CHAT_AGENT_CONTEXT_TEMPLATE_V1 = """
Context: A medical image has been diagnosed with the following initial assessment:
{diagnosis}

Please provide helpful, detailed, and compassionate responses to the user's questions
about this diagnosis. Maintain a supportive and informative tone.
"""


def build_context_message(diagnosis: str) -> str:
    """
    Build the leading context message with the diagnosis injected verbatim.

    Args:
        diagnosis: Diagnosis text previously returned by /analyze

    Returns:
        Context message for the chat session
    """
    return CHAT_AGENT_CONTEXT_TEMPLATE_V1.format(diagnosis=diagnosis)
