import json
from dataclasses import dataclass
from typing import List, Tuple

from .errors import CatalogUnavailable


@dataclass(frozen=True)
class Question:
    text: str
    choices: Tuple[str, ...]
    correct_answer: str
    hint: str = ''

    def is_correct(self, answer) -> bool:
        return answer == self.correct_answer

    def to_dict(self, include_hint=True):
        data = {
            'text': self.text,
            'choices': list(self.choices),
        }
        if include_hint:
            data['hint'] = self.hint
        return data


def parse_question(raw, position: int) -> Question:
    """Build a Question from one catalog entry, validating its shape."""
    if not isinstance(raw, dict):
        raise CatalogUnavailable(f'Question {position} is not an object')
    text = raw.get('question')
    choices = raw.get('choices')
    correct = raw.get('correct_answer')
    hint = raw.get('hint') or ''
    if not isinstance(text, str) or not text:
        raise CatalogUnavailable(f'Question {position} has no text')
    if not isinstance(choices, list) or not choices or not all(isinstance(c, str) for c in choices):
        raise CatalogUnavailable(f'Question {position} must have a non-empty list of string choices')
    if len(set(choices)) != len(choices):
        raise CatalogUnavailable(f'Question {position} has duplicate choices')
    if correct not in choices:
        raise CatalogUnavailable(f'Question {position} correct answer is not one of its choices')
    if not isinstance(hint, str):
        raise CatalogUnavailable(f'Question {position} hint must be a string')
    return Question(text=text, choices=tuple(choices), correct_answer=correct, hint=hint)


def load_questions(path: str) -> List[Question]:
    """Load the ordered question catalog.

    Any problem with the file is a deployment error and raises
    CatalogUnavailable; there is no fallback catalog.
    """
    try:
        with open(path, encoding='utf-8') as fh:
            parsed = json.load(fh)
    except OSError as exc:
        raise CatalogUnavailable(f'Cannot read questions file {path}: {exc}') from exc
    except ValueError as exc:
        raise CatalogUnavailable(f'Questions file {path} is not valid JSON: {exc}') from exc

    raw_questions = parsed.get('questions') if isinstance(parsed, dict) else None
    if not isinstance(raw_questions, list):
        raise CatalogUnavailable('Invalid questions file format: missing questions array')
    if not raw_questions:
        raise CatalogUnavailable('Questions file contains no questions')
    return [parse_question(raw, i) for i, raw in enumerate(raw_questions)]
