"""Catalog of the game revisions an environment can be bootstrapped for."""

import re
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Tuple

_LEADING_DIGITS = re.compile(r"\d+")


@dataclass(frozen=True)
class RevisionInfo:
    description: str
    webclient: bool = False
    wip: bool = False
    # Branch/tag of the Java client, when it differs from the revision id.
    client_branch: Optional[str] = None


DEFAULT_REVISIONS = {
    "225": RevisionInfo("May 18, 2004", webclient=True),
    "244": RevisionInfo("June 28, 2004", webclient=True),
    "245.2": RevisionInfo('July 13, 2004 (there were 3 "245" builds!)', webclient=True),
    "254": RevisionInfo("September 7, 2004", webclient=True),
    "377-wip": RevisionInfo("May 5, 2006", wip=True, client_branch="377"),
}


def _numeric_prefix(rev: str) -> Optional[int]:
    match = _LEADING_DIGITS.match(rev)
    return int(match.group()) if match else None


class RevisionCatalog:
    """
    Static revision id -> RevisionInfo table.

    Unknown ids are tolerated everywhere: they have no web client, are not
    WIP, and clone the Java client at the id itself.
    """

    def __init__(self, revisions: Optional[Dict[str, RevisionInfo]] = None):
        self._revisions = dict(DEFAULT_REVISIONS if revisions is None else revisions)

    def __contains__(self, rev: str) -> bool:
        return rev in self._revisions

    def __iter__(self) -> Iterator[str]:
        return iter(self._revisions)

    def __len__(self) -> int:
        return len(self._revisions)

    def describe(self, rev: str) -> Optional[RevisionInfo]:
        return self._revisions.get(rev)

    def has_webclient(self, rev: str) -> bool:
        info = self.describe(rev)
        return info is not None and info.webclient

    def is_wip(self, rev: str) -> bool:
        info = self.describe(rev)
        return info is not None and info.wip

    def java_client_branch(self, rev: str) -> str:
        info = self.describe(rev)
        if info is not None and info.client_branch:
            return info.client_branch
        return rev

    def ordered_for_prompt(self) -> List[Tuple[str, RevisionInfo]]:
        """
        Entries for the version picker: released revisions first, WIP last,
        each group ascending by the id's leading number. Ids without a
        leading number go after the numbered ones of their group.
        """

        def key(item):
            rev, info = item
            number = _numeric_prefix(rev)
            return (info.wip, number is None, number or 0)

        return sorted(self._revisions.items(), key=key)
