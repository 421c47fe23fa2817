"""Part-of-speech token streams for POS n-gram vectorization."""

from __future__ import annotations

from typing import List, Optional

from docketcluster.text.clean import basic_clean

try:  # pragma: no cover - heavy optional dependency
    import spacy
except Exception:  # pragma: no cover
    spacy = None  # type: ignore

DEFAULT_MODEL = 'en_core_web_sm'


class PosTagger:
    """Callable mapping comment text to its sequence of part-of-speech tags.

    Tagging is done entirely by the spaCy pipeline; parser and NER are disabled
    since only the tagger output is used.
    """

    def __init__(self, model_name: str = DEFAULT_MODEL, *, fine: bool = False, nlp=None) -> None:
        self.model_name = model_name
        self.fine = fine
        self._nlp = nlp

    @property
    def nlp(self):
        if self._nlp is None:
            if spacy is None:
                raise RuntimeError('spaCy is required for part-of-speech tagging')
            self._nlp = spacy.load(self.model_name, disable=['parser', 'ner'])
        return self._nlp

    def tag(self, text: str) -> List[str]:
        doc = self.nlp(basic_clean(text))
        tags: List[str] = []
        for token in doc:
            if token.is_space or token.is_punct:
                continue
            tags.append(token.tag_ if self.fine else token.pos_)
        return tags

    def __call__(self, text: Optional[str]) -> List[str]:
        if not text:
            return []
        return self.tag(text)


__all__ = ['PosTagger', 'DEFAULT_MODEL']
