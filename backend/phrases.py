# phrases.py
"""
Turns a bag of confirmed gesture symbols into one natural patient sentence.

Known combinations come from a static template table (a few casual variants
per key); anything else is built from per-symbol clauses.
"""
import random
from types import MappingProxyType
from typing import Dict, Iterable, Mapping, Optional, Sequence, Tuple

KEY_DELIMITER = ","

# "pain" only makes sense next to a body part, so it has no clause of its own
INTENSIFIER = "pain"


class InvalidInput(ValueError):
    """Raised when synthesis is asked for a sentence without any symbols."""


NATURAL_PHRASES = {
    # single symptoms
    "eyes": [
        "Hey doc, my eyes have been acting up lately.",
        "So, my eyes have been giving me trouble.",
        "Doc, something's going on with my eyes.",
        "I came in because my eyes don't feel right.",
    ],
    "ear": [
        "My ear's been bothering me for a few days now.",
        "Hey, so something's up with my ear.",
        "Doc, my ear feels weird, thought I should get it checked.",
        "There's something wrong with my ear, it just doesn't feel right.",
    ],
    "sore throat": [
        "I've got this scratchy throat that won't quit.",
        "My throat's been killing me, hard to even swallow.",
        "So my throat's been really sore, figured I'd come in.",
        "Got a bad sore throat, it's been a few days now.",
    ],
    "cough": [
        "Can't shake this cough, it's been going on for a while.",
        "I've been coughing like crazy, it's exhausting.",
        "This cough just won't go away, you know?",
        "I keep coughing and coughing, it's really annoying.",
    ],
    "dizzy": [
        "I've been feeling kinda woozy lately, like off balance.",
        "Getting these dizzy spells, it's a bit scary honestly.",
        "I feel lightheaded a lot, especially when I stand up.",
        "Been having some vertigo or something, room keeps spinning.",
    ],
    "fever": [
        "I think I've been running a fever, feeling super warm.",
        "Been feeling feverish, kinda hot and cold, you know?",
        "Pretty sure I have a fever, been feeling awful.",
        "I've had a temp for a couple days now.",
    ],
    "blood pressure": [
        "Wanted to get my blood pressure checked, been worried about it.",
        "Not sure if my blood pressure is okay, just wanted to check.",
        "Been concerned about my blood pressure lately.",
        "Think something might be off with my blood pressure.",
    ],

    # two symptoms, one ordering each; the synthesizer also tries the reverse
    "eyes,pain": [
        "My eyes are really hurting, like a sharp pain behind them.",
        "Got this pain in my eyes, it's been pretty bad.",
        "There's this ache in my eyes that won't let up.",
    ],
    "ear,pain": [
        "My ear is killing me, like serious pain in there.",
        "Got an earache that's pretty intense, doc.",
        "The pain in my ear is really bad, can barely sleep.",
    ],
    "sore throat,pain": [
        "My throat hurts so bad, even drinking water is painful.",
        "Got a really painful sore throat, it's hard to swallow anything.",
    ],
    "sore throat,fever": [
        "Sore throat and I'm pretty sure I have a fever too.",
        "My throat's killing me and I've been feeling feverish.",
        "Got a fever and this awful sore throat.",
    ],
    "cough,pain": [
        "This cough is hurting my chest every time, it's rough.",
        "Coughing so much it's actually painful now.",
    ],
    "cough,fever": [
        "Got a bad cough and running a fever, feel pretty rough.",
        "Been coughing a lot and I'm feverish too.",
        "Fever and this cough that won't quit.",
    ],
    "cough,sore throat": [
        "My throat's sore and I can't stop coughing.",
        "Got this cough and my throat is wrecked.",
    ],
    "dizzy,pain": [
        "Feeling dizzy and got a bad headache with it.",
        "I'm lightheaded and there's this pain too.",
    ],
    "dizzy,blood pressure": [
        "Getting dizzy spells, thinking it might be my blood pressure.",
        "Feeling woozy, worried it could be a BP thing.",
    ],
    "fever,pain": [
        "Running a fever and my whole body aches.",
        "Got a fever and just hurting all over.",
        "Feeling feverish with lots of body aches.",
    ],
    "eyes,fever": [
        "My eyes are bothering me and I think I have a fever.",
        "Eyes are hurting and I'm feeling feverish too.",
    ],
    "ear,fever": [
        "Ear's hurting and I've got a fever going on.",
        "Got an earache and running a fever.",
    ],

    # three symptoms: only the orderings listed here are matched
    "pain,fever,cough": [
        "I'm not doing great, body aches, fever, and can't stop coughing.",
        "Got the whole package - fever, cough, and everything hurts.",
    ],
    "fever,pain,cough": [
        "I'm not doing great, body aches, fever, and can't stop coughing.",
        "Got the whole package - fever, cough, and everything hurts.",
    ],
    "cough,pain,fever": [
        "I'm not doing great, body aches, fever, and can't stop coughing.",
    ],
    "dizzy,fever,pain": [
        "Feeling dizzy, got a fever, and everything hurts.",
        "I'm lightheaded, feverish, and in pain - not a good combo.",
    ],
    "fever,dizzy,pain": [
        "Feeling dizzy, got a fever, and everything hurts.",
        "I'm lightheaded, feverish, and in pain - not a good combo.",
    ],
    "pain,dizzy,fever": [
        "Feeling dizzy, got a fever, and everything hurts.",
    ],
    "cough,sore throat,fever": [
        "My throat's sore, can't stop coughing, and I'm running a fever.",
        "Got the works - sore throat, cough, and fever.",
    ],
    "sore throat,cough,fever": [
        "My throat's sore, can't stop coughing, and I'm running a fever.",
    ],
    "fever,cough,sore throat": [
        "My throat's sore, can't stop coughing, and I'm running a fever.",
    ],
}

SYMPTOM_CLAUSES = {
    "eyes": "my eyes are bothering me",
    "ear": "my ear's been acting up",
    "sore throat": "got a sore throat",
    "cough": "can't shake this cough",
    "dizzy": "feeling kinda dizzy",
    "fever": "running a fever",
    "blood pressure": "worried about my blood pressure",
}


def make_key(symbols: Iterable[str]) -> str:
    return KEY_DELIMITER.join(symbols)


def clean_symbols(symbols: Iterable[str]) -> Tuple[str, ...]:
    return tuple(s.strip().lower() for s in symbols if s and s.strip())


def capitalize_first(text: str) -> str:
    return text[:1].upper() + text[1:]


class PhraseTemplateTable:
    """Read-only mapping of template key -> sentence variants."""

    def __init__(self, phrases: Mapping[str, Sequence[str]],
                 clauses: Mapping[str, str] = None):
        table: Dict[str, Tuple[str, ...]] = {}
        for key, variants in phrases.items():
            variants = tuple(variants)
            if not variants:
                raise ValueError(f"template '{key}' has no sentence variants")
            table[make_key(clean_symbols(key.split(KEY_DELIMITER)))] = variants
        self._phrases = MappingProxyType(table)
        self._clauses = MappingProxyType(dict(clauses or {}))

    def __len__(self):
        return len(self._phrases)

    def __contains__(self, key):
        return key in self._phrases

    def lookup(self, key: str) -> Optional[Tuple[str, ...]]:
        return self._phrases.get(key)

    def clause(self, symbol: str) -> Optional[str]:
        return self._clauses.get(symbol)

    def keys(self):
        return self._phrases.keys()


def build_default_table() -> PhraseTemplateTable:
    return PhraseTemplateTable(NATURAL_PHRASES, SYMPTOM_CLAUSES)


class PhraseSynthesizer:
    def __init__(self, table: PhraseTemplateTable = None, rng: random.Random = None):
        self.table = table if table is not None else build_default_table()
        self.rng = rng or random.Random()

    def candidates(self, symbols: Sequence[str]) -> Optional[Tuple[str, ...]]:
        """Variants a templated input can produce, or None if no template applies."""
        words = clean_symbols(symbols)
        if not words:
            raise InvalidInput("No words provided")
        return self._match(words)

    def _match(self, words: Tuple[str, ...]) -> Optional[Tuple[str, ...]]:
        variants = self.table.lookup(make_key(words))
        # reversed lookup only for pairs; longer permutations are not tried
        if variants is None and len(words) == 2:
            variants = self.table.lookup(make_key(reversed(words)))
        return variants

    def synthesize(self, symbols: Sequence[str]) -> str:
        words = clean_symbols(symbols)
        if not words:
            raise InvalidInput("No words provided")

        variants = self._match(words)
        if variants is not None:
            return self.rng.choice(variants)
        return self.build_sentence(words)

    def build_sentence(self, words: Sequence[str]) -> str:
        parts = [self.table.clause(w) for w in words if w != INTENSIFIER]
        parts = [p for p in parts if p]

        if not parts:
            readable = [w.replace("_", " ") for w in words]
            return f"I have {' and '.join(readable)}."

        if len(parts) == 1:
            return capitalize_first(parts[0]) + "."
        return capitalize_first(", ".join(parts[:-1]) + " and " + parts[-1]) + "."
