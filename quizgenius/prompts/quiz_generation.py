"""Prompt for learning-module generation."""

MULTIPLE_CHOICE_COUNT = 5
OPTIONS_PER_QUESTION = 4
TRUE_FALSE_COUNT = 5
SHORT_ANSWER_COUNT = 3


QUIZ_GENERATION_PROMPT = """<role>
You are an expert educator's assistant. You turn educational documents into comprehensive learning modules.
</role>

<task>
Based on the document text below, generate a learning module with exactly four sections:
'multipleChoice', 'trueFalse', 'shortAnswer', and 'topicSummaries'.
</task>

<rules>
1. Create exactly {mc_count} multiple-choice questions, each with {option_count} options.
2. The correctAnswer of a multiple-choice question MUST be one of its options, copied verbatim.
3. Create exactly {tf_count} true/false questions.
4. Create exactly {sa_count} short-answer questions, each with a concise answer.
5. Write a concise summary for each of the main topics covered in the text.
</rules>

<output_format>
Return a single JSON object with all four keys.
If you cannot generate content for a section for any reason, you MUST provide an empty array for it
(e.g., "shortAnswer": []). DO NOT omit any keys from the final JSON object.
</output_format>

<document>
{document_text}
</document>

Please generate the learning module now."""


def create_quiz_generation_prompt(document_text: str) -> str:
    """
    Create the generation prompt for an (already truncated) document text.

    Args:
        document_text: Text extracted from the uploaded document

    Returns:
        Formatted prompt string
    """
    return QUIZ_GENERATION_PROMPT.format(
        mc_count=MULTIPLE_CHOICE_COUNT,
        option_count=OPTIONS_PER_QUESTION,
        tf_count=TRUE_FALSE_COUNT,
        sa_count=SHORT_ANSWER_COUNT,
        document_text=document_text,
    )
