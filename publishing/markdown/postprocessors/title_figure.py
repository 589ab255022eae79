# publishing/markdown/postprocessors/title_figure.py
"""
Postprocessor that turns titled images into figures.

    ![A heron](/heron.jpg "Grey heron at dawn")

Pandoc renders ``<img src="/heron.jpg" alt="A heron" title="Grey heron at dawn">``
which becomes:

    <figure>
      <img src="/heron.jpg" alt="A heron" title="Grey heron at dawn">
      <figcaption>Grey heron at dawn</figcaption>
    </figure>

Images without a title, and images already inside a figure, are untouched.
A paragraph that only held the image is replaced by the figure.
"""

from bs4 import BeautifulSoup


def wrap_titled_images(soup: BeautifulSoup, context: dict) -> None:
    for img in list(soup.find_all("img")):
        title = (img.get("title") or "").strip()
        if not title or img.find_parent("figure"):
            continue

        figure = soup.new_tag("figure")
        caption = soup.new_tag("figcaption")
        caption.string = title

        parent = img.parent
        only_child = (
            parent is not None
            and parent.name == "p"
            and len([c for c in parent.contents if str(c).strip()]) == 1
        )

        if only_child:
            parent.replace_with(figure)
            figure.append(img)
        else:
            img.replace_with(figure)
            figure.append(img)
        figure.append(caption)
