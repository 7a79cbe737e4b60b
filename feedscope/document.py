"""
Document query.

Wraps raw XML/HTML text in a queryable tree. Elements are selected with
CSS selectors matched against qualified tag names, so namespaced elements
are addressed as ``dc\\:creator`` whether or not the prefix is declared.
"""

from functools import lru_cache

from bs4 import BeautifulSoup
from cssselect import GenericTranslator
from lxml import etree

from .logging_config import get_logger

logger = get_logger(__name__)

# Root tag used when the input cannot be recovered into any tree
PLACEHOLDER_ROOT = "document"


class _QualifiedNameTranslator(GenericTranslator):
    """CSS to XPath translator that compares elements by qualified name."""

    def xpath_element(self, selector):
        # Universal element plus an explicit name() condition. name() is
        # "prefix:local", or just "local" for default-namespace elements;
        # a plain node test would never match those.
        xpath = self.xpathexpr_cls(element="*")
        if selector.element:
            xpath.add_condition(f"name() = {self.xpath_literal(selector.element)}")
        return xpath


_translator = _QualifiedNameTranslator()


@lru_cache(maxsize=256)
def _compile(css: str, axis: str) -> etree.XPath:
    return etree.XPath(_translator.css_to_xpath(css, prefix=axis))


def _xml_parser() -> etree.XMLParser:
    # Text arrives already decoded, so the declared encoding is overridden.
    return etree.XMLParser(
        recover=True,
        strip_cdata=False,
        resolve_entities=False,
        no_network=True,
        encoding="utf-8",
    )


class Element:
    """A single element of a parsed document."""

    __slots__ = ("node",)

    def __init__(self, node: etree._Element):
        self.node = node

    def __repr__(self) -> str:
        return f"<Element {self.name}>"

    @property
    def name(self) -> str:
        """Qualified tag name, e.g. ``title`` or ``media:content``."""
        tag = self.node.tag
        local = tag.split("}", 1)[1] if tag.startswith("{") else tag
        prefix = self.node.prefix
        return f"{prefix}:{local}" if prefix else local

    def attr(self, name: str) -> str | None:
        """
        Get an attribute value.

        Prefixed names such as ``rdf:resource`` are resolved through the
        element's namespace map when the prefix is declared.
        """
        value = self.node.get(name)
        if value is None and ":" in name:
            prefix, local = name.split(":", 1)
            uri = self.node.nsmap.get(prefix)
            if uri:
                value = self.node.get(f"{{{uri}}}{local}")
        return value

    def text(self) -> str:
        """Concatenated text content, CDATA included, comments excluded."""
        return str(self.node.xpath("string()"))

    def inner_markup(self) -> str:
        """Serialized children exactly as markup, with CDATA sections kept."""
        if self.node.text is None and len(self.node) == 0:
            return ""
        markup = etree.tostring(self.node, encoding="unicode", with_tail=False)
        start = markup.index(">") + 1
        end = markup.rindex("</")
        return markup[start:end]

    def select(self, css: str) -> list["Element"]:
        """All descendants matching ``css`` in document order."""
        return [Element(node) for node in _compile(css, "descendant::")(self.node)]

    def children(self, css: str | None = None) -> list["Element"]:
        """Direct children, optionally filtered by ``css``, in document order."""
        if css is None:
            return [Element(node) for node in self.node if isinstance(node.tag, str)]
        return [Element(node) for node in _compile(css, "child::")(self.node)]

    def first_child(self, css: str) -> "Element | None":
        found = self.children(css)
        return found[0] if found else None


class Document:
    """Parsed document plus the raw text it came from."""

    def __init__(self, text: str, root: etree._Element):
        self.text = text
        self.root = Element(root)
        self._soup: BeautifulSoup | None = None

    def select(self, css: str) -> list[Element]:
        """All elements, root included, matching ``css`` in document order."""
        return [Element(node) for node in _compile(css, "descendant-or-self::")(self.root.node)]

    def html(self) -> BeautifulSoup:
        """HTML view of the same text, for pages that are not well-formed XML."""
        if self._soup is None:
            self._soup = BeautifulSoup(self.text, "lxml")
        return self._soup


def parse_document(text: str) -> Document:
    """
    Parse XML or HTML text into a queryable document.

    Never raises: malformed markup is recovered as far as possible and
    input with no recoverable element yields an empty placeholder root.

    Args:
        text: Raw document text.

    Returns:
        Queryable document.
    """
    text = text or ""
    source = text.lstrip("\ufeff \t\r\n")

    root = None
    if source:
        try:
            root = etree.fromstring(source.encode("utf-8"), _xml_parser())
        except etree.XMLSyntaxError as e:
            logger.debug("Unrecoverable markup, using empty document", extra={"error": str(e)})

    if root is None:
        root = etree.Element(PLACEHOLDER_ROOT)

    return Document(text, root)
