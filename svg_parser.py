from __future__ import annotations
import html
import re
from pathlib import Path
from typing import Optional

token_pattern = re.compile(r'(<!--.*?-->)|(<[^>]*?>)|([^<]+)', flags=re.DOTALL)
first_word_pattern = re.compile(r'^\s*[/!?]*\s*([\w:-]+)')
attribute_pattern = re.compile(r'([\w:.-]+)\s*=\s*(?:"([^"]*)"|\'([^\']*)\')', flags=re.DOTALL)

def is_self_terminating(svg_value: str) -> bool:
    return svg_value.rstrip().endswith('/>')

def is_terminator(svg_value: str) -> bool:
    return svg_value.strip().startswith('</')

def is_declaration(svg_value: str) -> bool:
    return svg_value.strip()[:2] in ('<?', '<!')

def get_tag(svg_value: str) -> str:
    match = first_word_pattern.search(svg_value.strip().lstrip('<'))
    if match:
        return match.group(1)
    return ""

def parse_attributes(element: str) -> dict:
    content = element.strip()
    if content.startswith('</'):
        return {}
    parts = content.lstrip('<').rstrip('>').rstrip('/').split(None, 1)
    if len(parts) < 2:
        return {}

    attributes = {}
    for key, double_quoted, single_quoted in attribute_pattern.findall(parts[1]):
        value = double_quoted if double_quoted or not single_quoted else single_quoted
        attributes[key] = html.unescape(value)
    return attributes

def tokenize(data: str) -> list[tuple[str, str]]:
    """Split a document into ``("tag", text)`` and ``("text", text)`` entries."""
    entries = []
    for comment, tag, text in token_pattern.findall(data):
        if comment:
            continue
        if tag:
            entries.append(("tag", tag))
        elif text:
            entries.append(("text", text))
    return entries

class Node:
    def __init__(self, element: str):
        self.tag = get_tag(element)
        self.attributes = parse_attributes(element)
        self.children = []
        self.parent = None
        self.content = []

    def add_node_child(self, new_node: 'Node'):
        new_node.parent = self
        self.children.append(new_node)
        self.content.append(new_node)
        return new_node

    def compare_tag(self, element: str) -> bool:
        return self.tag == get_tag(element)

    def _raw_text(self) -> str:
        return "".join(item if isinstance(item, str) else item._raw_text() for item in self.content)

    @property
    def text(self) -> str:
        return html.unescape(self._raw_text())

    def get_attribute(self, attr_name: str, default: str = None) -> str:
        return self.attributes.get(attr_name, default)

def build_tree(entries: list[tuple[str, str]]) -> Optional[Node]:
    root = None
    current = None

    for kind, value in entries:
        if kind == "text":
            if current is not None:
                current.content.append(value)
            continue
        if is_declaration(value):
            continue

        if root is None:
            if get_tag(value) != "svg":
                continue
            root = Node(value)
            current = root
            if is_self_terminating(value):
                break
            continue

        if current is None:
            break

        if is_terminator(value):
            # unbalanced closers walk up until they find their opener
            node = current
            while node is not None and not node.compare_tag(value):
                node = node.parent
            if node is not None:
                current = node.parent
            continue

        child = current.add_node_child(Node(value))
        if not is_self_terminating(value):
            current = child

    return root

def parse_svg(data: str) -> Optional[Node]:
    return build_tree(tokenize(data))

def parse_svg_file(path: Path) -> Optional[Node]:
    with open(path, 'r', encoding='utf-8') as file:
        return parse_svg(file.read())
