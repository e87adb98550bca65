import random

import pytest

from phrases import InvalidInput, PhraseSynthesizer, PhraseTemplateTable


class IndexChooser:
    """Stands in for random.Random and always picks the same position."""

    def __init__(self, index):
        self.index = index

    def choice(self, seq):
        return seq[self.index]


def reachable(table, symbols):
    variants = table.lookup("eyes,pain")
    return {PhraseSynthesizer(table, rng=IndexChooser(i)).synthesize(symbols)
            for i in range(len(variants))}


@pytest.mark.parametrize("symbols", [["eyes", "pain"], ["pain", "eyes"], [" EYES ", "Pain"]])
def test_eyes_pain_draws_from_registered_variants(table, symbols):
    variants = set(table.lookup("eyes,pain"))
    assert reachable(table, symbols) == variants


def test_templated_output_is_always_registered(synthesizer, table):
    variants = table.lookup("cough,fever")
    for seed in range(25):
        synthesizer.rng = random.Random(seed)
        assert synthesizer.synthesize(["fever", "cough"]) in variants


def test_single_symptom_template(synthesizer, table):
    assert synthesizer.synthesize(["dizzy"]) in table.lookup("dizzy")


def test_three_symbol_template_only_in_registered_order(synthesizer, table):
    assert synthesizer.synthesize(["pain", "fever", "cough"]) in table.lookup("pain,fever,cough")
    # no permutation search beyond pairs, and "pain" has no clause
    assert synthesizer.synthesize(["cough", "fever", "pain"]) == "Can't shake this cough and running a fever."


def test_unknown_symbol_literal_fallback(synthesizer):
    assert synthesizer.synthesize(["unknownsymbol"]) == "I have unknownsymbol."


def test_pain_alone_uses_literal_fallback(synthesizer):
    sentence = synthesizer.synthesize(["pain"])
    assert sentence == "I have pain."


def test_underscores_become_spaces(synthesizer):
    assert synthesizer.synthesize(["runny_nose", "itchy_skin"]) == "I have runny nose and itchy skin."


def test_generative_pair_without_template(synthesizer):
    assert synthesizer.synthesize(["eyes", "ear"]) == "My eyes are bothering me and my ear's been acting up."


def test_generative_list_uses_commas(synthesizer):
    sentence = synthesizer.synthesize(["cough", "dizzy", "blood pressure"])
    assert sentence == "Can't shake this cough, feeling kinda dizzy and worried about my blood pressure."


def test_unknown_symbols_contribute_nothing(synthesizer):
    assert synthesizer.synthesize(["cough", "xyz"]) == "Can't shake this cough."


@pytest.mark.parametrize("symbols", [[], ["  "], ["", " "]])
def test_empty_input_is_invalid(synthesizer, symbols):
    with pytest.raises(InvalidInput):
        synthesizer.synthesize(symbols)


def test_candidates(synthesizer, table):
    assert synthesizer.candidates(["pain", "ear"]) == table.lookup("ear,pain")
    assert synthesizer.candidates(["eyes", "ear"]) is None


def test_table_rejects_empty_variants():
    with pytest.raises(ValueError):
        PhraseTemplateTable({"cough": []})


def test_table_is_read_only(table):
    assert isinstance(table.lookup("ear"), tuple)
    with pytest.raises(TypeError):
        table._phrases["ear"] = ("changed",)


def test_independent_tables():
    custom = PhraseTemplateTable({"Wave": ["Hello!"]}, {"nod": "yes please"})
    synth = PhraseSynthesizer(custom, rng=random.Random(0))

    assert synth.synthesize(["wave"]) == "Hello!"
    assert synth.synthesize(["nod"]) == "Yes please."
    assert "wave" not in PhraseSynthesizer().table
