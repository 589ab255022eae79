"""
Character dialogue filter tests

Operates on hand-built Pandoc JSON documents so the visitor can be checked
without running pandoc.
"""

from publishing.markdown.filters.character_dialogue import CharacterDialogueFilter, transform


def para(text):
    return {"t": "Para", "c": [{"t": "Str", "c": text}]}


def div(classes, children, attributes=()):
    return {"t": "Div", "c": [["", list(classes), [list(a) for a in attributes]], children]}


def document(*blocks):
    return {"pandoc-api-version": [1, 23, 1], "meta": {}, "blocks": list(blocks)}


def raw_blocks(blocks):
    return [b["c"][1] for b in blocks if b["t"] == "RawBlock"]


class TestKnownCharacter:
    def test_div_becomes_aside(self, characters):
        result = transform(document(div(["owl"], [para("Hello")])), characters)

        blocks = result["blocks"]
        assert [b["t"] for b in blocks] == ["RawBlock", "Para", "RawBlock"]
        opening, closing = raw_blocks(blocks)
        assert opening.startswith('<aside data-character="owl" class="character-dialogue"')
        assert 'aria-label="Character dialogue: owl"' in opening
        assert (
            '<img class="character-dialogue-image" src="/owl.webp" alt="owl" '
            'loading="lazy" width="100">'
        ) in opening
        assert opening.endswith('<div class="character-dialogue-content">')
        assert closing == "</div></aside>"
        assert blocks[1] == para("Hello")

    def test_alignment(self, characters):
        result = transform(
            document(div(["owl"], [para("Hi")], attributes=[("align", "right")])), characters
        )
        opening = raw_blocks(result["blocks"])[0]
        assert 'class="character-dialogue align-right"' in opening

    def test_unknown_alignment_ignored(self, characters):
        result = transform(
            document(div(["owl"], [para("Hi")], attributes=[("align", "center")])), characters
        )
        opening = raw_blocks(result["blocks"])[0]
        assert 'class="character-dialogue"' in opening

    def test_url_is_attribute_escaped(self):
        result = transform(document(div(["owl"], [para("Hi")])), {"owl": '/owl.webp" onload="x'})
        opening = raw_blocks(result["blocks"])[0]
        assert 'src="/owl.webp&quot; onload=&quot;x"' in opening

    def test_nested_in_blockquote(self, characters):
        quote = {"t": "BlockQuote", "c": [div(["unicorn"], [para("Neigh")])]}
        result = transform(document(quote), characters)

        inner = result["blocks"][0]["c"]
        assert [b["t"] for b in inner] == ["RawBlock", "Para", "RawBlock"]
        assert 'data-character="unicorn"' in inner[0]["c"][1]

    def test_nested_in_list_item(self, characters):
        bullets = {"t": "BulletList", "c": [[div(["owl"], [para("Item")])]]}
        result = transform(document(bullets), characters)

        item = result["blocks"][0]["c"][0]
        assert [b["t"] for b in item] == ["RawBlock", "Para", "RawBlock"]

    def test_input_document_not_mutated(self, characters):
        source = document(div(["owl"], [para("Hello")]))
        transform(source, characters)
        assert source["blocks"][0]["t"] == "Div"


class TestUnknownCharacter:
    def test_unknown_div_kept(self, characters):
        original = div(["dragon"], [para("Roar")])
        result = transform(document(original), characters)
        assert result["blocks"] == [original]

    def test_known_inside_unknown_is_converted(self, characters):
        outer = div(["note"], [div(["owl"], [para("Hoot")])])
        result = transform(document(outer), characters)

        kept = result["blocks"][0]
        assert kept["t"] == "Div"
        children = kept["c"][1]
        assert [b["t"] for b in children] == ["RawBlock", "Para", "RawBlock"]

    def test_div_without_classes(self, characters):
        original = div([], [para("Plain")])
        assert transform(document(original), characters)["blocks"] == [original]

    def test_empty_character_map(self):
        source = document(div(["owl"], [para("Hello")]))
        assert transform(source, {}) is source


class TestFilterCounting:
    def test_counts_replacements(self, characters):
        ast_filter = CharacterDialogueFilter(characters)
        ast_filter.apply(
            document(div(["owl"], [para("a")]), div(["unicorn"], [para("b")]), para("c"))
        )
        assert ast_filter.replaced == 2
