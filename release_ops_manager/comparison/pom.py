"""Comparison of POM files that tolerates the expected version difference."""

from pathlib import Path
from xml.etree import ElementTree as ET

import structlog

logger = structlog.get_logger(__name__)

VERSION_PLACEHOLDER = "@@version@@"


def local_name(tag: str) -> str:
    """Tag name without its XML namespace."""
    return tag.rsplit("}", 1)[-1]


def find_child(element: ET.Element, name: str) -> ET.Element | None:
    """First direct child with the given local name."""
    for child in element:
        if isinstance(child.tag, str) and local_name(child.tag) == name:
            return child
    return None


def child_text(element: ET.Element, name: str) -> str | None:
    child = find_child(element, name)
    if child is None or child.text is None:
        return None
    return child.text.strip()


def project_group_of(root: ET.Element) -> str | None:
    """The groupId of the project, inherited from the parent when not declared."""
    group = child_text(root, "groupId")
    if group:
        return group
    parent = find_child(root, "parent")
    return child_text(parent, "groupId") if parent is not None else None


def substitute_project_versions(root: ET.Element, versions: set[str], project_group: str | None) -> int:
    """Replace the given versions with the placeholder where they are versions of the project's own group.

    The project's own <version> is always a candidate. Any other element
    declaring a groupId and version (dependencies, plugins, the parent) is
    only touched when its groupId is the project group. Returns the number of
    substitutions.
    """
    substituted = 0
    own_version = find_child(root, "version")
    if own_version is not None and own_version.text and own_version.text.strip() in versions:
        own_version.text = VERSION_PLACEHOLDER
        substituted += 1
    if not project_group:
        return substituted
    for element in root.iter():
        if element is root:
            continue
        version = find_child(element, "version")
        if version is None or not version.text or version.text.strip() not in versions:
            continue
        if child_text(element, "groupId") == project_group:
            version.text = VERSION_PLACEHOLDER
            substituted += 1
    return substituted


def canonicalize(root: ET.Element) -> str:
    """Canonical XML form of the tree, ignoring formatting whitespace."""
    return ET.canonicalize(xml_data=ET.tostring(root, encoding="unicode"), strip_text=True)


def text_lines(content: str) -> str:
    """Non-blank lines of the content, stripped."""
    return "\n".join(line.strip() for line in content.splitlines() if line.strip())


class PomComparator:
    """Compares the POM of the previous version with the POM of the current build."""

    def __init__(self, previous_version: str, current_version: str, project_group: str | None = None) -> None:
        """Initialize the comparator.

        Args:
            previous_version: Version of the published POM.
            current_version: Version of the POM of the current build.
            project_group: Group whose artifacts carry the project version. Read from the POM when not given.
        """
        self.previous_version = previous_version
        self.current_version = current_version
        self.project_group = project_group

    def normalize(self, content: bytes) -> str:
        """Substitute the project versions with the placeholder and canonicalize the XML.

        Content that is not well-formed XML is compared line by line, without
        any version tolerance.
        """
        try:
            root = ET.fromstring(content)
        except ET.ParseError as exc:
            logger.warning("POM is not well-formed XML, comparing it as text", error=str(exc))
            return text_lines(content.decode("utf-8", errors="replace"))
        versions = {v for v in (self.previous_version, self.current_version) if v}
        substitute_project_versions(root, versions, self.project_group or project_group_of(root))
        return canonicalize(root)

    def are_equal(self, previous: Path, current: Path) -> bool:
        """Whether the POM files differ in nothing but the project version."""
        equal = self.normalize(previous.read_bytes()) == self.normalize(current.read_bytes())
        logger.debug("Compared POM files", previous=str(previous), current=str(current), equal=equal)
        return equal
