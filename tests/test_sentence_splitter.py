"""Podział na zdania i filtry szumu."""

from article_parser.sentence_splitter import is_rejected, split_sentences


class TestSplit:
    def test_boundaries_and_offsets(self):
        text = "The Moon orbits Earth. It is bright!  Is it?"
        spans = split_sentences(text)
        assert [s.text for s in spans] == ["The Moon orbits Earth.", "It is bright!", "Is it?"]
        for span in spans:
            assert text[span.start_offset:span.end_offset] == span.text

    def test_decimal_point_is_not_a_boundary(self):
        spans = split_sentences("It formed 4.51 billion years ago. Later it cooled down.")
        assert [s.text for s in spans] == ["It formed 4.51 billion years ago.", "Later it cooled down."]

    def test_lowercase_continuation_is_not_a_boundary(self):
        spans = split_sentences("Distances are given in approx. kilometres for the Moon.")
        assert len(spans) == 1

    def test_closing_quote_stays_with_sentence(self):
        spans = split_sentences('He said "it is round." Then he left the room.')
        assert spans[0].text == 'He said "it is round."'

    def test_trailing_fragment_without_period(self):
        spans = split_sentences("First sentence here. Trailing fragment words")
        assert spans[-1].text == "Trailing fragment words"

    def test_empty_text(self):
        assert split_sentences("   ") == []


class TestRejected:
    def test_short_and_punctuation(self):
        assert is_rejected("Ok.")
        assert is_rejected("... !!")

    def test_single_word(self):
        assert is_rejected("Moonlight.")

    def test_symbol_heavy(self):
        assert is_rejected("ab {{{{ cd }}}} ||||")

    def test_dangling_conjunction(self):
        assert is_rejected("and then the Moon rose.")

    def test_see_also_and_media_extension(self):
        assert is_rejected("See also the Earth article.")
        assert is_rejected("ogg, 2 minutes of audio")

    def test_all_caps_heading_leak(self):
        assert is_rejected("EXTERNAL LINKS")

    def test_retrieved_and_citation_lines(self):
        assert is_rejected("Retrieved 12 March 2020.")
        assert is_rejected("retrieved from the archive on 12 March.")
        assert is_rejected("ARCHIVED from the original site.")
        assert is_rejected("Smith, J. (March 3, 2020) Lunar notes.")

    def test_regular_sentence_kept(self):
        assert not is_rejected("The Moon is Earth's only natural satellite.")
