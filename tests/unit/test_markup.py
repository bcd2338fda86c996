"""Tests for the markup readers and parsers."""

import pytest

from boardgame_shelf.ingestion.markup import (
    RegexFragmentReader,
    collection_total,
    decode_entities,
    extract_collection_ids,
    parse_item,
    parse_items,
    split_items,
)
from boardgame_shelf.ingestion.markup.parsers import to_float, to_int


class TestDecodeEntities:
    """Tests for entity decoding."""

    def test_all_five_entities(self) -> None:
        """Test each predefined entity."""
        assert decode_entities("&lt;a&gt; &amp; &quot;b&quot; &apos;c&apos;") == "<a> & \"b\" 'c'"

    def test_single_pass(self) -> None:
        """Test that an escaped entity is decoded only once."""
        assert decode_entities("&amp;quot;") == "&quot;"
        assert decode_entities("&amp;amp;") == "&amp;"

    def test_other_references_untouched(self) -> None:
        """Test that numeric references are left as-is."""
        assert decode_entities("line&#10;break") == "line&#10;break"


class TestSplitItems:
    """Tests for fragment splitting."""

    def test_split_fixture(self, thing_xml: str) -> None:
        """Test both items of the fixture are found."""
        fragments = split_items(thing_xml)

        assert len(fragments) == 2
        assert fragments[0].startswith('<item type="boardgame" id="13">')
        assert fragments[0].endswith("</item>")

    def test_items_wrapper_not_matched(self) -> None:
        """Test that <items> is not mistaken for an item."""
        assert split_items('<items total="0"></items>') == []


class TestRegexFragmentReader:
    """Tests for the regex-backed reader."""

    FRAGMENT = (
        '<item type="boardgame" id="7">'
        "<thumbnail>  https://img/t.jpg  </thumbnail>"
        '<name type="primary" value="A &amp; B" />'
        '<minplayers value="2" />'
        '<link type="boardgamecategory" value="Cards" />'
        "</item>"
    )

    def test_root_attr(self) -> None:
        """Test reading the outer element's attributes."""
        reader = RegexFragmentReader(self.FRAGMENT)

        assert reader.root_attr("id") == "7"
        assert reader.root_attr("type") == "boardgame"
        assert reader.root_attr("missing") is None

    def test_text_trimmed(self) -> None:
        """Test element text is trimmed."""
        reader = RegexFragmentReader(self.FRAGMENT)

        assert reader.text("thumbnail") == "https://img/t.jpg"
        assert reader.text("image") is None

    def test_attr_and_tags_decoded(self) -> None:
        """Test attribute values are entity-decoded."""
        reader = RegexFragmentReader(self.FRAGMENT)

        assert reader.attr("minplayers", "value") == "2"
        assert reader.attr("maxplayers", "value") is None
        assert reader.tags("name") == [{"type": "primary", "value": "A & B"}]
        assert reader.tags("poll") == []


class TestNumbers:
    """Tests for numeric coercion."""

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [("7", 7), ("7.0", 7), ("-2200", -2200), ("7.5", None), ("", None), ("abc", None)],
    )
    def test_to_int(self, raw: str, expected: int | None) -> None:
        """Test integral parsing."""
        assert to_int(raw) == expected

    def test_to_float_rejects_non_finite(self) -> None:
        """Test NaN and infinity become None."""
        assert to_float("nan") is None
        assert to_float("inf") is None
        assert to_float("7.09669") == pytest.approx(7.09669)
        assert to_float(None) is None


class TestParseItem:
    """Tests for game record parsing."""

    def test_full_item(self, thing_xml: str) -> None:
        """Test every field of a complete item."""
        record = parse_items(thing_xml)[13]

        assert record.name == "CATAN"
        assert record.yearpublished == 1995
        assert record.players.min == 3
        assert record.players.max == 4
        assert record.playtime.min == 60
        assert record.playtime.max == 120
        assert record.thumbnail == (
            "https://cf.geekdo-images.com/W3Bsga_uLP9kO91gZ7H8yw__thumb/img/catan.jpg"
        )
        assert record.image is not None
        assert record.categories == ["Economic", "Negotiation"]
        assert record.mechanics == ["Dice Rolling", "Trading"]
        assert record.ratings.average == pytest.approx(7.09669)
        assert record.ratings.bayesaverage == pytest.approx(6.92042)
        assert record.ratings.usersrated == 124033
        assert record.bgg_url == "https://boardgamegeek.com/boardgame/13"

    def test_primary_name_preferred_and_decoded(self, thing_xml: str) -> None:
        """Test the primary name wins even when not listed first."""
        record = parse_items(thing_xml)[1406]

        assert record.name == "Monopoly & Friends"
        assert record.mechanics == ["Roll & Move"]

    def test_duplicate_links_kept(self, thing_xml: str) -> None:
        """Test links keep source order and duplicates."""
        record = parse_items(thing_xml)[1406]

        assert record.categories == ["Economic", "Economic"]

    def test_first_name_fallback(self) -> None:
        """Test the first name is used without a primary one."""
        record = parse_item(
            '<item id="5"><name type="alternate" value="Alt One" />'
            '<name type="alternate" value="Alt Two" /></item>'
        )

        assert record is not None
        assert record.name == "Alt One"

    def test_missing_fields_are_none(self) -> None:
        """Test absent fields degrade to None instead of zero."""
        record = parse_item('<item type="boardgame" id="42"></item>')

        assert record is not None
        assert record.name is None
        assert record.yearpublished is None
        assert record.players.min is None
        assert record.players.max is None
        assert record.playtime.min is None
        assert record.thumbnail is None
        assert record.categories == []
        assert record.mechanics == []
        assert record.ratings.average is None
        assert record.ratings.usersrated is None

    def test_non_numeric_values_are_none(self) -> None:
        """Test garbage numbers do not abort the item."""
        record = parse_item(
            '<item id="42"><minplayers value="two" /><maxplayers value="4" />'
            '<average value="" /><yearpublished value="1999.5" /></item>'
        )

        assert record is not None
        assert record.players.min is None
        assert record.players.max == 4
        assert record.ratings.average is None
        assert record.yearpublished is None

    def test_entity_in_name_decoded_once(self) -> None:
        """Test an escaped entity survives as literal text."""
        record = parse_item(
            '<item id="3"><name type="primary" value="Say &amp;quot;hi&amp;quot;" /></item>'
        )

        assert record is not None
        assert record.name == "Say &quot;hi&quot;"

    @pytest.mark.parametrize(
        "fragment",
        [
            '<item type="boardgame"><name type="primary" value="No Id" /></item>',
            '<item id="abc"><name type="primary" value="Bad Id" /></item>',
            '<item id="0"></item>',
        ],
    )
    def test_unusable_id_dropped(self, fragment: str) -> None:
        """Test fragments without a usable id are dropped."""
        assert parse_item(fragment) is None
        assert parse_items(f"<items>{fragment}</items>") == {}


class TestCollectionIds:
    """Tests for collection id extraction."""

    def test_ids_deduplicated_and_sorted(self, collection_xml: str) -> None:
        """Test ids come back unique and ascending."""
        assert extract_collection_ids(collection_xml) == [13, 822, 9209]

    def test_empty_collection(self) -> None:
        """Test an empty collection yields no ids."""
        xml = '<items totalitems="0" termsofuse="x"></items>'

        assert extract_collection_ids(xml) == []
        assert collection_total(xml) == 0

    def test_total(self, collection_xml: str) -> None:
        """Test reading the total attribute."""
        assert collection_total(collection_xml) == 4
        assert collection_total('<items total="7">') == 7
        assert collection_total("<error/>") is None
