"""
Grammars producing Word sequences.
"""
from robospeak.grammar.engine import GrammarEngine
from robospeak.grammar.expressions import DEFAULT_CATALOG, Expression
from robospeak.grammar.identity import IdentityRegistry
from robospeak.grammar.ramble import RambleGrammar
from robospeak.grammar.state import GrammarState


def grammar_for(settings):
    """Build the grammar named by settings.grammar ("subphrases" or "ramble")."""
    if settings.grammar == "ramble":
        return RambleGrammar(settings.length_range, settings.pool_cap)
    if settings.grammar == "subphrases":
        return GrammarEngine(length_range=settings.length_range, pool_cap=settings.pool_cap)
    raise ValueError(f"Unknown grammar: {settings.grammar!r}")


__all__ = [
    "GrammarEngine",
    "RambleGrammar",
    "IdentityRegistry",
    "GrammarState",
    "Expression",
    "DEFAULT_CATALOG",
    "grammar_for",
]
