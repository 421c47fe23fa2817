from .clean import basic_clean, tokenize
from .stopwords import ENGLISH_STOP_WORDS, load_stop_words

__all__ = ['basic_clean', 'tokenize', 'ENGLISH_STOP_WORDS', 'load_stop_words']
