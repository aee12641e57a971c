"""Footnote discovery and renumbering for txxt documents."""

import logging
import re
from dataclasses import dataclass

from .errors import require_text
from .models import FootnoteDeclaration
from .text import line_index_at

logger = logging.getLogger(__name__)

FOOTNOTE_DECLARATION_PATTERN = re.compile(r"^\[(\d+)\]\s+(.+)$", re.MULTILINE)
FOOTNOTE_REFERENCE_PATTERN = re.compile(r"\[(\d+)\]")


@dataclass
class FootnoteResult:
    """Result of renumbering the footnotes of a document."""

    content: str
    declarations: int
    renumber_map: dict[str, str]

    @property
    def changed(self) -> bool:
        return any(old != new for old, new in self.renumber_map.items())


class FootnoteEngine:
    """Renumbers footnotes in the order their declarations appear."""

    def find_declarations(self, content: str) -> list[FootnoteDeclaration]:
        """Find "[n] body" declaration lines in physical order.

        A marker without its closing bracket simply does not match.
        """
        declarations = []
        for match in FOOTNOTE_DECLARATION_PATTERN.finditer(content):
            declarations.append(
                FootnoteDeclaration(
                    original_label=match.group(1),
                    body=match.group(2).rstrip("\r"),
                    line_index=line_index_at(content, match.start()),
                )
            )
        return declarations

    def build_renumber_map(self, declarations: list[FootnoteDeclaration]) -> dict[str, str]:
        """Map each declared label to its position among the declarations.

        Declarations found as 3, 1, 2 map 3→1, 1→2, 2→3. A label declared
        twice keeps the number of its first declaration.
        """
        renumber_map: dict[str, str] = {}
        for declaration in declarations:
            if declaration.original_label not in renumber_map:
                renumber_map[declaration.original_label] = str(len(renumber_map) + 1)
        return renumber_map

    def rewrite(self, content: str, renumber_map: dict[str, str]) -> str:
        """Substitute every "[label]" in a single pass.

        Each marker is looked up in the map exactly once, so a label that was
        just rewritten can never be picked up again by another mapping.
        Labels missing from the map are left as they are.
        """
        if not renumber_map:
            return content

        def substitute(match: re.Match[str]) -> str:
            label = match.group(1)
            return f"[{renumber_map.get(label, label)}]"

        return FOOTNOTE_REFERENCE_PATTERN.sub(substitute, content)

    def renumber(self, content: str) -> FootnoteResult:
        """Renumber declarations and references to 1..N.

        Returns:
            FootnoteResult; with no declarations the content is unchanged.
        """
        require_text(content, "number_footnotes")
        declarations = self.find_declarations(content)
        if not declarations:
            return FootnoteResult(content=content, declarations=0, renumber_map={})

        renumber_map = self.build_renumber_map(declarations)
        logger.debug("Footnote renumber map: %s", renumber_map)
        return FootnoteResult(
            content=self.rewrite(content, renumber_map),
            declarations=len(declarations),
            renumber_map=renumber_map,
        )
