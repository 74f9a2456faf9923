from typing import Dict, Optional

from ninjasvg.storage import COMPONENTS_NAMESPACE, MODULES_NAMESPACE, InMemoryStorage

# An export as written by common vector editors: tab indented, with a
# stylesheet of numbered classes and a path spanning two lines.
SAMPLE_TEMPLATE = (
    '<svg version="1.1" id="Layer_1" xmlns="http://www.w3.org/2000/svg" '
    'x="0px" y="0px"\n'
    '\tviewBox="0 0 1000 1000" style="enable-background:new 0 0 1000 1000;" '
    'xml:space="preserve">\n'
    '<style type="text/css">\n'
    "\t.st0{fill:#FFFFFF;}\n"
    "\t.st1{fill:none;stroke:#000000;stroke-width:4;}\n"
    "\t.st2{font-family:'Arial';enable-background:new    ;}\n"
    "</style>\n"
    '<path class="st0" d="M10 10\n'
    '\tL20 20"/>\n'
    '<circle class="st1" cx="500" cy="500" r="100"/>\n'
    '<text class="st2" x="10" y="20">%%ST1%%</text>\n'
    "</svg>\n"
)

SAMPLE_INNER_SVG = (
    '<path fill="#FFFFFF" d="M10 10 L20 20"/>\n'
    '<circle fill="none" stroke="#000000" stroke-width="4" '
    'cx="500" cy="500" r="100"/>\n'
    "<text font-family=\"'Arial'\" x=\"10\" y=\"20\">Alice</text>"
)

SAMPLE_MODULE = (
    '<svg xmlns="http://www.w3.org/2000/svg" width="200" height="200">'
    '<rect class="st0" x="0" y="0" width="10" height="10"/>'
    "</svg>"
)


def storage_with(
    components: Optional[Dict[str, str]] = None,
    modules: Optional[Dict[str, str]] = None,
) -> InMemoryStorage:
    """Return an in-memory storage holding the given templates by id."""
    storage = InMemoryStorage()
    for inscription_id, content in (components or {}).items():
        storage.put(COMPONENTS_NAMESPACE, f"{inscription_id}.svg", content)
    for inscription_id, content in (modules or {}).items():
        storage.put(MODULES_NAMESPACE, f"{inscription_id}.svg", content)
    return storage
