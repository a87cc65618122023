"""wdrift — CLI porównania artykułów Wikipedii i Grokipedii."""

__version__ = "0.1.0"
