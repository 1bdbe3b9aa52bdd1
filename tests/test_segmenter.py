from __future__ import annotations

from phrasepair.nlp.segmenter import DEFAULT_ABBREVIATIONS, SentenceSegmenter, split_into_sentences


def test_abbreviation_period_is_not_a_boundary() -> None:
    out = split_into_sentences("Dr. Smith went home. He left at 5.")
    assert out == ["Dr. Smith went home.", "He left at 5."]


def test_blank_input_yields_nothing() -> None:
    assert split_into_sentences("") == []
    assert split_into_sentences("   \n\t ") == []


def test_resegmenting_a_sentence_is_stable() -> None:
    text = "Hello world. This is Mr. Lee speaking. Prices rose, e.g. bread! Why? Ask Prof. Kim etc. Done"
    for sentence in split_into_sentences(text):
        assert split_into_sentences(sentence) == [sentence]


def test_mixed_terminators_and_newlines() -> None:
    text = "Wait! Are you sure? Yes.\n\nNew paragraph without a stop\nLast line"
    assert split_into_sentences(text) == [
        "Wait!",
        "Are you sure?",
        "Yes.",
        "New paragraph without a stop",
        "Last line",
    ]


def test_abbreviation_case_is_preserved() -> None:
    out = split_into_sentences("I met DR. Who and mrs. Hudson. They waved.")
    assert out == ["I met DR. Who and mrs. Hudson.", "They waved."]


def test_multi_period_abbreviations() -> None:
    out = split_into_sentences("Bring fruit, e.g. apples, i.e. something sweet. Thanks.")
    assert out == ["Bring fruit, e.g. apples, i.e. something sweet.", "Thanks."]


def test_abbreviation_must_start_a_word() -> None:
    # "Amr." ends with "mr." but is a name, so its period still ends the sentence
    out = split_into_sentences("I spoke to Amr. He agreed.")
    assert out == ["I spoke to Amr.", "He agreed."]


def test_custom_abbreviation_table() -> None:
    seg = SentenceSegmenter(abbreviations=("M.", "Mme."))
    out = seg.segment("M. Dupont est là. Mme. Durand aussi.")
    assert out == ["M. Dupont est là.", "Mme. Durand aussi."]
    # Default table does not know French titles
    assert len(split_into_sentences("Voici Mme. Durand.")) == 2


def test_default_table_is_immutable() -> None:
    assert isinstance(DEFAULT_ABBREVIATIONS, tuple)
    assert "Mr." in DEFAULT_ABBREVIATIONS
