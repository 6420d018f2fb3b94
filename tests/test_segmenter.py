"""Tests for the tweetstorm segmenter."""

import logging

import pytest

from tweetstorm.blocks import Boundary, ContentBlock
from tweetstorm.length import LIMIT, estimate
from tweetstorm.registry import DEFAULT_REGISTRY, TextTemplate
from tweetstorm.segmenter import segment, split_block_text


def by_length(limit):
    """Estimator where ``limit`` plain characters fill a tweet exactly."""
    return lambda text: len(text) * 1000 // limit


def paragraph(client_id, content):
    return ContentBlock(client_id, "core/paragraph", {"content": content})


class TestGrouping:
    def test_short_blocks_share_one_tweet(self):
        blocks = [paragraph("a", "Hello."), paragraph("b", "World."), paragraph("c", "Again.")]
        tweets = segment(blocks)
        assert len(tweets) == 1
        assert tweets[0].client_ids == ["a", "b", "c"]
        assert tweets[0].content == "Hello.\n\nWorld.\n\nAgain."
        assert tweets[0].current is False
        assert tweets[0].boundaries == []

    def test_empty_input(self):
        assert segment([]) == []

    def test_new_tweet_when_block_does_not_fit(self):
        blocks = [paragraph("a", "Hello there."), paragraph("b", "World."), paragraph("c", "Again.")]
        tweets = segment(blocks, estimator=by_length(20))
        assert [t.client_ids for t in tweets] == [["a", "b"], ["c"]]
        assert tweets[0].content == "Hello there.\n\nWorld."
        assert tweets[1].content == "Again."

    def test_accepts_editor_dicts(self):
        tweets = segment([
            {"clientId": "a", "name": "core/paragraph", "attributes": {"content": "Hi."}},
            {"clientId": "b", "name": "core/heading", "attributes": {"content": "Bye."}},
        ])
        assert tweets[0].content == "Hi.\n\nBye."

    def test_unknown_block_is_kept_without_text(self):
        blocks = [
            paragraph("a", "Hello."),
            ContentBlock("img", "core/image", {"alt": "A cat"}),
            paragraph("b", "World."),
        ]
        tweets = segment(blocks)
        assert len(tweets) == 1
        assert tweets[0].client_ids == ["a", "img", "b"]
        assert tweets[0].content == "Hello.\n\nWorld."

    def test_unknown_block_first(self):
        tweets = segment([ContentBlock("img", "core/image"), paragraph("a", "Hello.")])
        assert tweets[0].client_ids == ["img", "a"]
        assert tweets[0].content == "Hello."

    def test_custom_registry(self):
        registry = DEFAULT_REGISTRY.copy()
        registry.register("my/callout", TextTemplate(("body",), "Note: {{body}}"))
        tweets = segment(
            [ContentBlock("c", "my/callout", {"body": "Read this."}), paragraph("a", "Done.")],
            registry=registry,
        )
        assert tweets[0].content == "Note: Read this.\n\nDone."


class TestSelection:
    def test_selected_block_marks_its_tweet(self):
        blocks = [paragraph("a", "Hello there."), paragraph("b", "World."), paragraph("c", "Again.")]
        tweets = segment(blocks, ["b"], estimator=by_length(20))
        assert [t.current for t in tweets] == [True, False]

    def test_selection_promotes_merged_tweet(self):
        blocks = [paragraph("a", "Hello."), paragraph("b", "World.")]
        tweets = segment(blocks, ["b"])
        assert tweets[0].current is True

    def test_multiple_selection_marks_nothing(self):
        blocks = [paragraph("a", "Hello."), paragraph("b", "World.")]
        tweets = segment(blocks, ["a", "b"])
        assert tweets[0].current is False

    def test_selected_split_block_marks_every_piece(self):
        block = paragraph("x", "First one. Second one. Third.")
        tweets = segment([paragraph("a", "Hi."), block], ["x"], estimator=by_length(20))
        assert [t.current for t in tweets] == [False, True, True]


class TestSentenceSplitting:
    def test_long_block_split_at_sentences(self):
        text = "First one. Second one. Third."
        tweets = segment([paragraph("x", text)], estimator=by_length(20))
        assert [t.content for t in tweets] == ["First one. ", "Second one. Third."]
        for tweet in tweets:
            assert tweet.client_ids == ["x"]
            assert tweet.boundaries == [Boundary(10, 11, "content")]

    def test_split_is_lossless(self):
        text = "First one. Second one. Third."
        tweets = segment([paragraph("x", text)], estimator=by_length(20))
        assert "".join(t.content for t in tweets) == text

    def test_split_block_not_joined_by_following_block(self):
        blocks = [
            paragraph("a", "Hi."),
            paragraph("x", "First one. Second one. Hi."),
            paragraph("c", "Ok."),
        ]
        tweets = segment(blocks, estimator=by_length(20))
        assert [t.client_ids for t in tweets] == [["a"], ["x"], ["x"], ["c"]]
        assert tweets[2].content == "Second one. Hi."

    def test_twitter_limit_respected(self):
        sentence = "x" * 98 + ". "
        text = sentence * 4 + "x" * 98 + "."
        block = paragraph("x", text)
        assert estimate(text) > 1500

        tweets = segment([block], ["x"])
        assert len(tweets) == 3
        assert all(t.current for t in tweets)
        assert all(estimate(t.content.strip()) <= LIMIT for t in tweets)
        assert tweets[0].boundaries == [
            Boundary(199, 200, "content"),
            Boundary(399, 400, "content"),
        ]
        for boundary in tweets[0].boundaries:
            assert text[boundary.start:boundary.end] == " "

    def test_quote_split_maps_into_value(self):
        block = ContentBlock("q", "core/quote", {"value": "First one. Second one.", "citation": "Me"})
        text = "“First one. Second one.” – Me"
        tweets = segment([block], estimator=by_length(20))
        assert [t.content for t in tweets] == ["“First one. ", "Second one.” – Me"]
        assert "".join(t.content for t in tweets) == text
        boundary = tweets[0].boundaries[0]
        assert boundary == Boundary(10, 11, "value")
        assert block.attributes["value"][boundary.start:boundary.end] == text[11]

    def test_markup_split_maps_into_raw_content(self):
        content = "<b>First</b> one. Second one. Third."
        tweets = segment([paragraph("x", content)], estimator=by_length(20))
        assert [t.content for t in tweets] == ["First one. ", "Second one. Third."]
        boundary = tweets[0].boundaries[0]
        assert boundary == Boundary(17, 18, "content")
        assert content[boundary.start:boundary.end] == " "


class TestWordSplitting:
    def test_long_sentence_split_at_words(self):
        pieces, offsets = split_block_text("alpha beta gamma delta epsilon", by_length(20))
        assert pieces == ["alpha beta gamma ", "delta epsilon"]
        assert offsets == [16]

    def test_word_boundary_lands_on_last_letter(self):
        text = "alpha beta gamma delta epsilon"
        tweets = segment([paragraph("x", text)], estimator=by_length(20))
        boundary = tweets[0].boundaries[0]
        assert boundary == Boundary(15, 16, "content")
        assert text[boundary.start:boundary.end] == "a"

    def test_short_sentence_then_long_sentence(self):
        text = "Tiny. alpha beta gamma delta epsilon"
        pieces, offsets = split_block_text(text, by_length(20))
        assert pieces == ["Tiny. ", "alpha beta gamma ", "delta epsilon"]
        assert offsets == [6, 22]
        assert "".join(pieces) == text

    def test_overlong_word_kept_whole(self, caplog):
        text = "supercalifragilistic ok"
        with caplog.at_level(logging.WARNING, logger="tweetstorm.segmenter"):
            tweets = segment([paragraph("x", text)], estimator=by_length(10))
        assert [t.content for t in tweets] == ["supercalifragilistic ", "ok"]
        assert "too long for a single tweet" in caplog.text

    def test_long_list_split_without_boundaries(self, caplog):
        block = ContentBlock(
            "l",
            "core/list",
            {},
            {"values": ("one thing", "two things", "three things")},
        )
        with caplog.at_level(logging.WARNING, logger="tweetstorm.segmenter"):
            tweets = segment([block], estimator=by_length(20))
        assert len(tweets) > 1
        assert all(t.boundaries == [] for t in tweets)
        assert "".join(t.content for t in tweets) == "- one thing\n- two things\n- three things"
        assert "multiline" in caplog.text


class TestDeterminism:
    @pytest.mark.parametrize("limit", [15, 30, 280])
    def test_same_input_same_output(self, limit):
        blocks = [
            paragraph("a", "One. Two. Three."),
            paragraph("b", "A longer sentence with several words in it."),
        ]
        first = segment(blocks, ["a"], estimator=by_length(limit))
        second = segment(blocks, ["a"], estimator=by_length(limit))
        assert [t.to_dict() for t in first] == [t.to_dict() for t in second]
