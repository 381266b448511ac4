import re
from collections import Counter
from typing import Any, Dict

from writing_eval.core.config import settings
from writing_eval.core.exceptions import ValidationException

_CODE_PATTERN = re.compile(r"<[^>]+>|{[^}]+}|console\.log|function\s*\(")
_SENTENCE_SPLIT = re.compile(r"[.!?\n]+")


def count_words(text: str) -> int:
    return len(text.split())


def is_meaningful(text: str) -> bool:
    '''
    반복/비문자/코드 입력 걸러내기:
    어휘 다양성 30% 이상, 최빈 단어 50% 이하, 알파벳 비율 50% 이상, HTML/코드 패턴 없음
    '''
    words = re.sub(r"[^\w\s]", "", text).lower().split()
    if not words:
        return False

    vocab_ratio = len(set(words)) / len(words)
    repetition_ratio = Counter(words).most_common(1)[0][1] / len(words)
    alpha_ratio = len(re.findall(r"[a-zA-Z]", text)) / len(text)

    if vocab_ratio < 0.3:
        return False
    if repetition_ratio > 0.5:
        return False
    if alpha_ratio < 0.5:
        return False
    if _CODE_PATTERN.search(text):
        return False
    return True


def define_english_check(text: str) -> bool:
    '''
    간단한 영어 텍스트 판별 함수: ASCII 문자 비율이 80% 이상이고 라틴 문자가 있는 경우 영어로 간주
    '''
    if not text:
        return False
    ascii_ratio = sum(1 for c in text if ord(c) < 128) / len(text)
    return ascii_ratio > 0.8 and re.search(r"[a-zA-Z]", text) is not None


def is_mostly_english(text: str, threshold: float = 0.2) -> bool:
    """True when at most `threshold` of the sentences look non-English."""
    sentences = [s.strip() for s in _SENTENCE_SPLIT.split(text) if s.strip()]
    if not sentences:
        return False
    non_english = sum(1 for s in sentences if not define_english_check(s))
    return non_english / len(sentences) <= threshold


def pre_process_submission(writing: str) -> Dict[str, Any]:
    """Screen a submission before it is sent to the model.

    Raises ValidationException on the first failed check, in the order:
    meaningful content, English, minimum/maximum words, maximum characters.
    """
    if not is_meaningful(writing):
        raise ValidationException(
            "Unmeaningful content",
            "Please submit a meaningful English text for analysis.",
        )

    if not is_mostly_english(writing):
        raise ValidationException(
            "Non-English text detected",
            "Your submission contains too much non-English content. Please submit your writing in English.",
        )

    word_count = count_words(writing)
    char_count = len(writing)

    if word_count < settings.MIN_WORDS:
        raise ValidationException(
            "Insufficient word count",
            f"Your writing contains only {word_count} words. "
            f"Please provide at least {settings.MIN_WORDS} words for a meaningful assessment.",
            {"wordCount": word_count},
        )
    if word_count > settings.MAX_WORDS:
        raise ValidationException(
            "Excessive word count",
            f"Your writing contains {word_count} words. The maximum allowed is {settings.MAX_WORDS} words.",
            {"wordCount": word_count},
        )
    if char_count > settings.MAX_CHARS:
        raise ValidationException(
            "Excessive character count",
            f"Your writing contains {char_count} characters. The maximum allowed is {settings.MAX_CHARS} characters.",
            {"charCount": char_count},
        )

    return {
        "word_count": word_count,
        "char_count": char_count,
        "is_meaningful": True,
        "is_english": True,
    }
