"""
Unit tests for prompt construction.
"""

from questify.generation.prompt import build_prompt
from questify.generation.schemas import GenerateRequest


def _request(**overrides) -> GenerateRequest:
    data = {
        "domain": "College",
        "subDomain": "B.Tech",
        "subject": "Computer Science",
        "topics": "Sorting, Graphs",
        "questionTypes": ["MCQs"],
        "numQuestions": "MCQs: 5",
    }
    data.update(overrides)
    return GenerateRequest.model_validate(data)


class TestBuildPrompt:
    def test_context_included(self):
        prompt = build_prompt(_request())

        assert "- Domain: College" in prompt
        assert "- Sub-domain/Class/Exam: B.Tech" in prompt
        assert "- Subject: Computer Science" in prompt
        assert "- Topics: Sorting, Graphs" in prompt
        assert "- Questions per Section: MCQs: 5" in prompt

    def test_domain_info_with_and_without_subject(self):
        assert '"domainInfo": "College - B.Tech (Computer Science)"' in build_prompt(_request())
        assert '"domainInfo": "School - Class 7"' in build_prompt(
            _request(domain="School", subDomain="Class 7", subject=None)
        )

    def test_json_shape_pinned(self):
        prompt = build_prompt(_request())

        for key in ('"title"', '"domainInfo"', '"instructions"', '"sections"', '"questions"',
                    '"options"', '"marks"', '"answer"', '"explanation"'):
            assert key in prompt

    def test_programming_block_only_when_requested(self):
        without = build_prompt(_request())
        with_code = build_prompt(_request(
            questionTypes=["MCQs", "Programming codes"],
            programmingLevels=["Easy", "Hard"],
            numQuestions="MCQs: 5, Programming codes: 2",
        ))

        assert "Special Instructions for 'Programming codes'" not in without
        assert "Special Instructions for 'Programming codes'" in with_code
        assert "- Programming Difficulty Levels: Easy, Hard" in with_code
        assert "Match the difficulty levels: Easy, Hard." in with_code

    def test_explanation_rule_follows_toggle(self):
        assert 'Do not include an "explanation" field.' in build_prompt(_request())
        assert '"explanation" briefly explains' in build_prompt(_request(includeExplanations=True))

    def test_user_braces_do_not_break_formatting(self):
        prompt = build_prompt(_request(topics="Sets {a, b}"))

        assert "- Topics: Sets {a, b}" in prompt
