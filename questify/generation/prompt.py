"""
Prompt Builder

Turns a GenerateRequest into the single natural-language prompt sent to the
model. The prompt pins the top-level JSON shape:

  {title, domainInfo, instructions,
   sections: [{type, questions: [{id, text, options, marks, answer, explanation}]}]}
"""

from questify.generation.schemas import (
    DEFAULT_INSTRUCTIONS,
    DEFAULT_TITLE,
    PROGRAMMING_CODES,
    GenerateRequest,
)


PAPER_PROMPT = """You are an expert educational content generator. Generate a high-quality question paper based on the following parameters:
- Domain: {domain}
- Sub-domain/Class/Exam: {sub_domain}
- Subject: {subject}
- Topics: {topics}
- Question Types Requested: {question_types}
- Questions per Section: {num_questions}
{programming_line}- Include Answers: {include_answers}
- Include Explanations: {include_explanations}

Return the data strictly in the following JSON format:
{{
  "title": "{title}",
  "domainInfo": "{domain_info}",
  "instructions": "{instructions}",
  "sections": [
    {{
      "type": "Section Type (one of: {question_types})",
      "questions": [
        {{
          "id": 1,
          "text": "The question text here",
          "options": ["Option A", "Option B", "Option C", "Option D"],
          "marks": 1,
          "answer": "The correct answer",
          "explanation": "The explanation"
        }}
      ]
    }}
  ]
}}

Field rules:
- Produce exactly one section per requested question type, in the order requested, each with the requested number of questions.
- "options" is only filled for MCQs; for every other type it MUST be an empty array.
- "marks" is a positive integer appropriate to the question.
- {answer_rule}
- {explanation_rule}
{programming_block}
General Instructions:
- Ensure the questions are syllabus-aligned.
- If "Case-based" is requested, provide a short paragraph followed by 2-3 related sub-questions.
- For MCQs, ensure options are plausible and clear.
- Return ONLY the JSON object.
"""


PROGRAMMING_BLOCK = """
Special Instructions for '{label}':
- Provide actual coding problems (e.g., 'Write a Python function to...', 'Implement a binary search in Java...').
- The 'answer' MUST be a clean, properly indented code block.
- Match the difficulty levels: {levels}.
- For 'Easy', focus on basic syntax and simple algorithms.
- For 'Mid', focus on intermediate data structures and logical problems.
- For 'Hard', focus on advanced algorithms, optimization, or complex system design.
- Ensure a balanced distribution of questions across the selected difficulty levels.
"""


def _yes_no(flag: bool) -> str:
    return "true" if flag else "false"


def build_prompt(request: GenerateRequest) -> str:
    """Build the generation prompt for one request."""
    question_types = ", ".join(request.question_types)
    levels = request.programming_levels or []

    programming_line = ""
    if levels:
        programming_line = f"- Programming Difficulty Levels: {', '.join(levels)}\n"

    programming_block = ""
    if PROGRAMMING_CODES in request.question_types:
        programming_block = PROGRAMMING_BLOCK.format(
            label=PROGRAMMING_CODES,
            levels=", ".join(levels) if levels else "appropriate for the domain",
        )

    if request.include_answers:
        answer_rule = (
            "\"answer\" holds the correct answer for every question; for "
            f"'{PROGRAMMING_CODES}' it is a complete, well-indented code solution."
        )
    else:
        answer_rule = (
            "\"answer\" is null, except for "
            f"'{PROGRAMMING_CODES}' where it is a complete, well-indented code solution."
        )

    if request.include_explanations:
        explanation_rule = "\"explanation\" briefly explains why the answer is correct."
    else:
        explanation_rule = "Do not include an \"explanation\" field."

    return PAPER_PROMPT.format(
        domain=request.domain,
        sub_domain=request.sub_domain,
        subject=request.subject or "",
        topics=request.topics,
        question_types=question_types,
        num_questions=request.num_questions,
        programming_line=programming_line,
        include_answers=_yes_no(request.include_answers),
        include_explanations=_yes_no(request.include_explanations),
        title=DEFAULT_TITLE,
        domain_info=request.domain_info,
        instructions=DEFAULT_INSTRUCTIONS,
        answer_rule=answer_rule,
        explanation_rule=explanation_rule,
        programming_block=programming_block,
    )
