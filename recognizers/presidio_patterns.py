"""
Адаптер граматики артефактів до Presidio Analyzer.

Кожен іменований патерн стає окремим PatternRecognizer з тим самим
regex, що використовують match/scan, тому результати збігаються.
"""

import logging
import re
from typing import Iterator, List, Optional, Tuple

from presidio_analyzer import (
    AnalyzerEngine,
    Pattern,
    PatternRecognizer,
    RecognizerRegistry,
    RecognizerResult,
)
from presidio_analyzer.nlp_engine import NlpArtifacts, NlpEngine

from core.config import config
from core.recognizer import ArtifactRecognizer, get_recognizer

logger = logging.getLogger(__name__)

# Без IGNORECASE: TLD мають власну групу (?i:...)
ARTIFACT_REGEX_FLAGS = re.DOTALL | re.MULTILINE

LANGUAGE = "en"


class PatternOnlyNlpEngine(NlpEngine):
    """
    NLP engine, що нічого не аналізує.

    AnalyzerEngine без явного engine завантажує spaCy модель; regex
    recognizers токени не використовують.
    """

    def __init__(self, languages: Optional[List[str]] = None):
        self._languages = list(languages or [LANGUAGE])

    def load(self) -> None:
        pass

    def is_loaded(self) -> bool:
        return True

    def process_text(self, text: str, language: str) -> NlpArtifacts:
        return NlpArtifacts(
            entities=[],
            tokens=[],
            lemmas=[],
            tokens_indices=[],
            nlp_engine=self,
            language=language
        )

    def process_batch(
        self,
        texts: List[str],
        language: str,
        batch_size: int = 1,
        n_process: int = 1,
        **kwargs
    ) -> Iterator[Tuple[str, NlpArtifacts]]:
        return ((text, self.process_text(text, language)) for text in texts)

    def is_stopword(self, word: str, language: str) -> bool:
        return False

    def is_punct(self, word: str, language: str) -> bool:
        return False

    def get_supported_entities(self) -> List[str]:
        return []

    def get_supported_languages(self) -> List[str]:
        return list(self._languages)


def build_pattern_recognizer(entity_type: str, source: str) -> PatternRecognizer:
    """PatternRecognizer для одного іменованого патерну; score з config."""
    return PatternRecognizer(
        supported_entity=entity_type,
        patterns=[
            Pattern(
                name=entity_type.lower(),
                regex=source,
                score=config.get_entity_score(entity_type)
            )
        ],
        name=f"{entity_type}Recognizer",
        supported_language=LANGUAGE,
        global_regex_flags=ARTIFACT_REGEX_FLAGS
    )


def build_analyzer_engine(recognizer: ArtifactRecognizer) -> AnalyzerEngine:
    """
    AnalyzerEngine тільки з recognizers артефактів.

    Реєстр порожній: вбудовані EMAIL_ADDRESS, IP_ADDRESS та інші
    Presidio recognizers перетиналися б з нашими типами.
    """
    registry = RecognizerRegistry()
    for name in sorted(recognizer.pattern_names()):
        registry.add_recognizer(
            build_pattern_recognizer(name, recognizer.get_pattern(name).source)
        )

    logger.info(f"Registered {len(registry.recognizers)} artifact recognizers in Presidio")
    return AnalyzerEngine(
        registry=registry,
        nlp_engine=PatternOnlyNlpEngine(),
        supported_languages=[LANGUAGE]
    )


class ArtifactPatternRecognizer:
    """
    Спільний для процесу AnalyzerEngine над типовим ArtifactRecognizer.

    Побудова реєстру з 24 regex не безкоштовна, тому екземпляр один.
    """

    _instance: Optional['ArtifactPatternRecognizer'] = None

    def __new__(cls):
        if cls._instance is None:
            instance = super().__new__(cls)
            instance._analyzer = build_analyzer_engine(get_recognizer())
            cls._instance = instance
            logger.info("ArtifactPatternRecognizer initialized")
        return cls._instance

    def analyze(
        self,
        text: str,
        enabled_entities: Optional[List[str]] = None,
        language: str = LANGUAGE
    ) -> List[RecognizerResult]:
        """
        Raises:
            ValueError: Порожній текст
            RuntimeError: Помилка всередині Presidio
        """
        if not text or text.isspace():
            raise ValueError("Текст не може бути порожнім")

        try:
            results = self._analyzer.analyze(
                text=text,
                entities=enabled_entities,
                language=language
            )
        except Exception as e:
            logger.error(f"Presidio analysis failed: {e}")
            raise RuntimeError(f"Помилка pattern detection: {e}") from e

        logger.debug(f"Presidio returned {len(results)} results")
        return results

    @property
    def supported_entities(self) -> List[str]:
        return self._analyzer.get_supported_entities()
