"""
Template filter tests
"""

from django.template import Context, Template


def render_template(source, **context):
    return Template("{% load markdown_tags %}" + source).render(Context(context))


class TestMarkdownFilter:
    def test_markdown(self, settings):
        settings.BLOG_CHARACTERS = {}
        html = render_template("{{ body|markdown }}", body="## Hi\n\n<script>x()</script>")
        assert '<h2 id="hi">Hi</h2>' in html
        assert "<script" not in html

    def test_empty_value(self):
        assert render_template("{{ body|markdown }}", body=None).strip() == ""


class TestTocTreeFilter:
    def test_nested_output(self):
        toc = [
            {"id": "a", "text": "A", "level": 1},
            {"id": "b", "text": "B", "level": 2},
        ]
        html = render_template(
            "{% for n in toc|toc_tree %}{{ n.id }}:{% for c in n.children %}{{ c.id }}{% endfor %}{% endfor %}",
            toc=toc,
        )
        assert html == "a:b"
