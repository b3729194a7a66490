"""
Unit tests for browser2pdf.outline.
"""
from lxml import etree

from browser2pdf.outline import OUTLINE_NAMESPACE, OutlineItem, build_outline, xml_escape

NS = {"o": OUTLINE_NAMESPACE}


def parse(xml_text):
    return etree.fromstring(xml_text.encode("utf-8"))


class TestXmlEscape:

    def test_escapes_all_reserved_characters(self):
        assert xml_escape("&<>\"'") == "&amp;&lt;&gt;&quot;&apos;"

    def test_leaves_plain_text_alone(self):
        assert xml_escape("chapter 1.html") == "chapter 1.html"


class TestBuildOutline:

    def test_reserved_characters_round_trip(self):
        title = "Tom & Jerry <\"quoted\"> 'single'"
        link = "https://example.com/?a=1&b=<2>"
        root = parse(build_outline([OutlineItem(title=title, link=link, page=2)]))

        entry = root.xpath("/o:outline/o:item/o:item", namespaces=NS)[0]

        assert entry.get("title") == title
        assert entry.get("link") == link

    def test_flat_structure_under_single_wrapper(self):
        items = [OutlineItem(f"in{idx}.html", f"file:///in{idx}.html", idx + 2) for idx in range(3)]
        root = parse(build_outline(items))

        assert root.tag == f"{{{OUTLINE_NAMESPACE}}}outline"
        wrappers = root.xpath("o:item", namespaces=NS)
        assert len(wrappers) == 1
        entries = wrappers[0].xpath("o:item", namespaces=NS)
        assert [entry.get("title") for entry in entries] == ["in0.html", "in1.html", "in2.html"]
        assert [entry.get("page") for entry in entries] == ["2", "3", "4"]
        assert all(not entry.xpath("o:item", namespaces=NS) for entry in entries)

    def test_empty_outline_still_has_wrapper(self):
        root = parse(build_outline([]))

        assert len(root.xpath("o:item", namespaces=NS)) == 1
        assert root.xpath("o:item/o:item", namespaces=NS) == []
