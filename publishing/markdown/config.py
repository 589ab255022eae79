# Bump when the pipeline output changes so cached renders can be refreshed.
RENDERER_ID = "pandoc-html5+character-dialogue@1"


def get_pandoc_config():
    """
    Configuration for pypandoc/Pandoc markdown rendering.

    Markdown is parsed to Pandoc's JSON AST, rewritten in Python (see
    ``publishing.markdown.filters``), then written back out as an HTML5
    fragment.

    Heading ids are NOT generated by Pandoc (``-auto_identifiers``); the
    ``heading_anchors`` postprocessor assigns them after sanitization so the
    ids in the HTML and the table of contents come from one place. Implicit
    figures are disabled too; titled images are wrapped by the
    ``title_figure`` postprocessor instead.
    """
    reader_extensions = [
        "-auto_identifiers",
        "-implicit_figures",
        "+pipe_tables",
        "+task_lists",
        "+strikeout",
        "+footnotes",
        "+fenced_divs",
        "+fenced_code_blocks",
        "+fenced_code_attributes",
        "+backtick_code_blocks",
        "+raw_html",
        "+smart",
    ]

    return {
        "reader": "markdown" + "".join(reader_extensions),
        "writer": "html5",
        "extra_args": [
            # No file or network access while rendering author content
            "--sandbox",
            # One line per block
            "--wrap=none",
        ],
    }
