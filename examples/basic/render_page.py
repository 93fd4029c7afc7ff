"""Render one page with a GitHub link and a version number, no page tree needed."""

from huellas import Markdown, Page, RenderConfig, RenderContext

config = RenderConfig(
    properties={
        "github.base_url": "https://github.com/lightbend/paradox",
        "project.version": "0.9.0",
    }
)
md = Markdown(RenderContext(Page("index.html", "Home"), config))

html = md("Version @var[project.version] fixes @github[#1](#1).")
print(html)
